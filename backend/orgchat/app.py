"""
Entry points for hosting the messaging subsystem.

    container = await create_chat_container()
    async with open_chat_session(container, identity) as session:
        await session.select_contact(session.contacts[0])
        await session.send("hello")
    await container.close()
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from dishka import AsyncContainer

from orgchat.application.services.chat_session import ChatSession
from orgchat.config.logging_config import setup_logging
from orgchat.config.settings import Config
from orgchat.domain.entities.identity import Identity
from orgchat.setup.ioc import create_container

logger = logging.getLogger(__name__)


async def create_chat_container() -> AsyncContainer:
    setup_logging(Config.LOG_LEVEL, Config.LOG_FILE)
    return await create_container()


@asynccontextmanager
async def open_chat_session(
    container: AsyncContainer, identity: Identity
) -> AsyncIterator[ChatSession]:
    """One chat session per signed-in member; closes its channel on exit."""
    async with container(context={Identity: identity}) as request_container:
        session = await request_container.get(ChatSession)
        await session.start()
        logger.info(f"[orgchat] Session opened for {identity.email} ({identity.role.label})")
        try:
            yield session
        finally:
            await session.close()
            logger.info(f"[orgchat] Session closed for {identity.email}")
