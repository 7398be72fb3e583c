"""Subscription, protection and threat-log features of the user dashboard."""
