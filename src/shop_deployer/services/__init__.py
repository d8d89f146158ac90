"""Service layer: deploy orchestration and deployment history queries."""
