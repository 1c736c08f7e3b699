"""Comments domain - session-scoped trainer notes with public/private visibility"""
