"""Business logic services for the RSVP reader."""
