"""Caregiver assignment domain: one active primary caregiver per client"""
