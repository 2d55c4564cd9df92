"""Constants module for the Graph HTTP service layer."""

from .server_constants import *  # noqa: F403
