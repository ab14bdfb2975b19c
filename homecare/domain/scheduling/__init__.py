"""
Scheduling Domain

Weekly schedule rules, scheduled visits and the caregiver day view.

Modules:
- time_window.py: calendar date / minute-of-day arithmetic and window clamping
- lane_packer.py: greedy lane assignment for overlapping intervals
- rule_resolver.py: expands weekly rules into one day's occurrences
- layout.py: per-caregiver column positioning for the day view
- service.py / repository.py / router.py: the HTTP path

Keep this file import-free; shared.validators imports time_window directly.
"""
