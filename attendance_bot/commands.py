import discord
from discord import app_commands

from .grammar import CommandRequest
from .models import Direction


class InteractionReplier:
    """Sends the first reply as the interaction response and the rest as followups."""

    def __init__(self, interaction: discord.Interaction) -> None:
        self.interaction = interaction

    async def send(self, content: str) -> None:
        # Never ping users from attendance replies.
        mentions = discord.AllowedMentions.none()
        if self.interaction.response.is_done():
            await self.interaction.followup.send(content, allowed_mentions=mentions)
        else:
            await self.interaction.response.send_message(content, allowed_mentions=mentions)


def register_commands(bot):
    """Register all slash commands on the bot. Called once during setup."""
    scope = {}
    if bot.config.guild_id is not None:
        scope["guild"] = discord.Object(id=bot.config.guild_id)

    async def run(interaction: discord.Interaction, request: CommandRequest) -> None:
        await bot.dispatcher.dispatch(request, interaction.user.name, InteractionReplier(interaction))

    @bot.tree.command(name="hi", description="Set a working start time", **scope)
    @app_commands.describe(
        date="YYYY/MM/DD, YYYYMMDD, YY/MM/DD, YYMMDD, MM/DD, M/D or MDD",
        start="HH:MM, HHMM, H:MM, HMM, HH or H",
        end="Optional end time in the same format",
        user="Record for another user",
    )
    async def hi(
        interaction: discord.Interaction,
        date: str | None = None,
        start: str | None = None,
        end: str | None = None,
        user: str | None = None,
    ):
        await run(
            interaction,
            CommandRequest(Direction.CLOCK_IN, user=_clean_user(user), date_text=date, from_text=start, to_text=end),
        )

    @bot.tree.command(name="bye", description="Set a working end time", **scope)
    @app_commands.describe(
        date="YYYY/MM/DD, YYYYMMDD, YY/MM/DD, YYMMDD, MM/DD, M/D or MDD",
        end="HH:MM, HHMM, H:MM, HMM, HH or H",
        start="Optional start time in the same format",
        user="Record for another user",
    )
    async def bye(
        interaction: discord.Interaction,
        date: str | None = None,
        end: str | None = None,
        start: str | None = None,
        user: str | None = None,
    ):
        await run(
            interaction,
            CommandRequest(Direction.CLOCK_OUT, user=_clean_user(user), date_text=date, from_text=start, to_text=end),
        )

    @bot.tree.command(name="delete", description="Delete all working times of a day", **scope)
    @app_commands.describe(date="Day to clear", user="Clear another user's day")
    async def delete(interaction: discord.Interaction, date: str, user: str | None = None):
        await run(interaction, CommandRequest(Direction.DELETE, user=_clean_user(user), date_text=date))

    listings = (
        ("list", "Print a working time list", Direction.LIST),
        ("csvlist", "Print a working time list as CSV", Direction.LIST_CSV),
        ("mdlist", "Print a working time list as a markdown table", Direction.LIST_MARKDOWN),
    )
    for name, description, direction in listings:
        _register_listing(bot, run, name, description, direction, scope)


def _register_listing(bot, run, name, description, direction, scope):
    @bot.tree.command(name=name, description=description, **scope)
    @app_commands.describe(month="YYYY/MM, YYYYMM, YY/MM, YYMM, MM or M", user="List another user's times")
    async def listing(interaction: discord.Interaction, month: str | None = None, user: str | None = None):
        await run(interaction, CommandRequest(direction, user=_clean_user(user), month_text=month))


def _clean_user(value: str | None) -> str | None:
    if not value:
        return None
    return value.strip().removeprefix("@") or None
