from fastapi import Depends, Request

from querypilot.app.agents.sqlgen import SqlGenerator
from querypilot.app.connectors.manager import ConnectionManager
from querypilot.app.services.confirmation import ConversationRegistry
from querypilot.app.services.query_service import QueryService


def get_connections(request: Request) -> ConnectionManager:
    return request.app.state.connections


def get_conversations(request: Request) -> ConversationRegistry:
    return request.app.state.conversations


def get_generator() -> SqlGenerator:
    return SqlGenerator()


def get_query_service(
    connections: ConnectionManager = Depends(get_connections),
    generator: SqlGenerator = Depends(get_generator),
    conversations: ConversationRegistry = Depends(get_conversations),
) -> QueryService:
    return QueryService(connections, generator, conversations)
