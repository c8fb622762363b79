"""Use cases de mensagens e contatos sobre sessões."""

from .messaging import DOCUMENT_MIMETYPE, SentFiles, SentMessage, SessionMessenger

__all__ = [
    "DOCUMENT_MIMETYPE",
    "SentFiles",
    "SentMessage",
    "SessionMessenger",
]
