"""Admin console pages (job scheduler console and stock watchlist)."""
