from .container import ContainerCreateRequest, ContainerUpdateRequest

__all__ = ['ContainerCreateRequest', 'ContainerUpdateRequest']
