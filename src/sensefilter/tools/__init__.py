"""Development helpers: opt-in timing instrumentation and response plots."""
