from oairesponder.provider import OAIProvider
from oairesponder.repository import OAIRepository


__all__ = ('OAIProvider', 'OAIRepository')
