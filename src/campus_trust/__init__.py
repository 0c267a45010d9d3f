"""Trust and access-control engine for a school community platform."""
