"""Startup jobs."""

from .seed_scopes import register_seeding, run_seed_once

__all__ = ["register_seeding", "run_seed_once"]
