"""Accounts domain - registration, login and member rosters"""
