from __future__ import annotations

import logging

import discord
from discord.ext import commands
from dotenv import load_dotenv

from .commands import register_commands
from .config import Config, load_config
from .db import Database
from .dispatcher import CommandDispatcher
from .grammar import parse_command
from .intervals import IntervalStore
from .ledger import LedgerAggregator
from .recorder import AttendanceRecorder


class ChannelReplier:
    def __init__(self, channel: discord.abc.Messageable) -> None:
        self.channel = channel

    async def send(self, content: str) -> None:
        await self.channel.send(content, allowed_mentions=discord.AllowedMentions.none())


class AttendanceBot(commands.Bot):
    def __init__(self, config: Config, db: Database) -> None:
        intents = discord.Intents.none()
        intents.guilds = True
        intents.guild_messages = True
        intents.message_content = True

        # Text commands go through the attendance grammar, so the prefix parser stays unused.
        super().__init__(command_prefix=commands.when_mentioned, intents=intents)

        self.config = config
        self.db = db
        self.store = IntervalStore(db)
        self.recorder = AttendanceRecorder(self.store)
        self.aggregator = LedgerAggregator(self.store)
        self.dispatcher = CommandDispatcher(
            self.recorder,
            self.aggregator,
            config.messages,
            list_delay_seconds=config.list_delay_seconds,
        )

        self.logger = logging.getLogger("attendance-bot")

    async def setup_hook(self) -> None:
        register_commands(self)
        if self.config.guild_id is not None:
            await self.tree.sync(guild=discord.Object(id=self.config.guild_id))
        else:
            await self.tree.sync()

    async def on_ready(self) -> None:
        self.logger.info("Connected as %s (%s)", self.user, self.user.id if self.user else "unknown")

    async def on_message(self, message: discord.Message) -> None:
        if message.author.bot:
            return

        channel_id = self.config.attendance_channel_id
        if channel_id is not None and message.channel.id != channel_id:
            return

        request = parse_command(message.content.strip())
        if request is None:
            return

        self.logger.debug("Command %s from %s", request.direction.value, message.author.name)
        await self.dispatcher.dispatch(request, message.author.name, ChannelReplier(message.channel))

    async def close(self) -> None:
        self.db.close()
        await super().close()


def configure_logging() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )


def main() -> None:
    load_dotenv()
    configure_logging()

    config = load_config()
    db = Database(config.db_path)
    db.initialize()

    bot = AttendanceBot(config=config, db=db)
    bot.run(config.discord_token, log_handler=None)


if __name__ == "__main__":
    main()
