"""Request controllers wrapped with the shared error funnel."""
