"""Client and caregiver directory reads"""
