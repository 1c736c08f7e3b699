"""Invites domain - single-use trainer invite codes"""
