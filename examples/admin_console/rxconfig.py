"""Reflex configuration for the admin console example."""

import reflex as rx

config = rx.Config(
    app_name="admin_console",
    plugins=[rx.plugins.SitemapPlugin()],
)
