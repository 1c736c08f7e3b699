"""Scheduling domain - PT session proposals, rescheduling and dual confirmation"""
