"""Core domain models and services for the serverless policy generator."""

from .models import DeploymentContext, PolicyDoc, PolicyStatement, ServerlessConfig

__all__ = ["DeploymentContext", "PolicyDoc", "PolicyStatement", "ServerlessConfig"]
