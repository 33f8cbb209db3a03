"""
Configuration management for the exit ticket reports backend.
"""
import os
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_float(name, default):
    value = os.getenv(name, "")
    return float(value) if value.strip() else default


def _env_int(name, default):
    value = os.getenv(name, "")
    return int(value) if value.strip() else default


# Analytics thresholds
COMPLETION_THRESHOLD = _env_float("EXIT_TICKETS_COMPLETION_THRESHOLD", 0.5)
DECILE_FRACTION = _env_float("EXIT_TICKETS_DECILE_FRACTION", 0.1)
FLIER_THRESHOLD = _env_float("EXIT_TICKETS_FLIER_THRESHOLD", 0.25)
FLIER_WINDOW = _env_int("EXIT_TICKETS_FLIER_WINDOW", 3)
FLIER_MIN_RESPONSES = _env_int("EXIT_TICKETS_FLIER_MIN_RESPONSES", 3)

# Server configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = _env_int("PORT", 3000)
DEBUG = os.getenv("DEBUG", "false").lower() == "true"


class Config:
    """Application configuration class."""

    def __init__(self):
        self.completion_threshold = COMPLETION_THRESHOLD
        self.decile_fraction = DECILE_FRACTION
        self.flier_threshold = FLIER_THRESHOLD
        self.flier_window = FLIER_WINDOW
        self.flier_min_responses = FLIER_MIN_RESPONSES

    def to_dict(self):
        return {
            "completion_threshold": self.completion_threshold,
            "decile_fraction": self.decile_fraction,
            "flier_threshold": self.flier_threshold,
            "flier_window": self.flier_window,
            "flier_min_responses": self.flier_min_responses,
        }

    def update(self, data: dict):
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)


# Global config instance
config = Config()
