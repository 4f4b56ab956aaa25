"""
Application Layer

Contains the resolution use case and the ports it depends on.
This layer orchestrates domain objects and infrastructure adapters.

Structure:
- interfaces/: Port interfaces for provider adapters
- services/: Resolver fan-out and the ResolutionService boundary
"""
