"""
Take5 Call Scheduling

Decides when each check-in group's next automated call should happen.
"""
