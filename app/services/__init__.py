"""Booking domain services"""
