"""Home-care scheduling and caregiver assignment service"""
