"""SmartFace attendance backend.

Feature modules (attendance, recognition, users) each follow the same layering:
plain dataclass models, a repository/collaborator interface, a service holding
the business rules and a thin Flask controller.
"""
