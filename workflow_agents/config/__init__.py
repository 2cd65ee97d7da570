"""Configuration module for Workflow Agents."""

# Import all constants
from .constants import *
