"""Announcement formatting for runs and live streams.

Turns domain observations into EmbedSpec payloads. Pure functions over
domain objects with no I/O.
"""

from collections.abc import Sequence

from .models import (
    EmbedField,
    EmbedSpec,
    GameInfo,
    RunObservation,
    StreamObservation,
)

RANK_COLORS = {
    1: 0xF1C40F,  # gold
    2: 0x979C9F,  # light grey
    3: 0xA84300,  # dark orange
}
OTHER_RANK_COLOR = 0xE74C3C  # red
LIVE_COLOR = 0x9146FF  # twitch purple

CHANNEL_URL_TEMPLATE = "https://www.twitch.tv/{login}"


class EmbedFormatter:
    """Builds announcement embeds.

    All methods are static as the class carries no state.
    """

    @staticmethod
    def format_time(time_seconds: float) -> str:
        """Render a run duration.

        Leading zero units are dropped and the fraction is omitted when
        the sub-second part is zero.

        Examples:
        0.0 → '0s'
        65.0 → '1m 5s'
        3725.5 → '1h 2m 5.500s'
        3605.0 → '1h 0m 5s'
        """
        total_ms = round(time_seconds * 1000)
        hours, rest_ms = divmod(total_ms, 3_600_000)
        minutes, second_ms = divmod(rest_ms, 60_000)

        if second_ms % 1000:
            seconds = f"{second_ms / 1000:.3f}s"
        else:
            seconds = f"{second_ms // 1000}s"

        if hours:
            return f"{hours}h {minutes}m {seconds}"
        if minutes:
            return f"{minutes}m {seconds}"
        return seconds

    @staticmethod
    def rank_color(place: int) -> int:
        """Accent color for a leaderboard rank."""
        return RANK_COLORS.get(place, OTHER_RANK_COLOR)

    @staticmethod
    def run_title(
        game: str,
        category: str,
        level: str | None = None,
        variable_labels: Sequence[str] = (),
    ) -> str:
        """Build '<Game> — [<Level> ]<Category>[ (<var1>, <var2>)]'."""
        title = f"{game} — "
        if level:
            title += f"{level} "
        title += category
        if variable_labels:
            title += f" ({', '.join(variable_labels)})"
        return title

    @staticmethod
    def run_embed(
        runner: str,
        run: RunObservation,
        game: GameInfo,
        category: str,
        level: str | None,
        variable_labels: Sequence[str],
    ) -> EmbedSpec:
        """Build the announcement for a new personal-best."""
        time = EmbedFormatter.format_time(run.time_seconds)
        return EmbedSpec(
            title=EmbedFormatter.run_title(game.name, category, level, variable_labels),
            description=f"**[{time} by {runner}]({run.weblink})**",
            color=EmbedFormatter.rank_color(run.place),
            thumbnail_url=game.cover_url,
            fields=(
                EmbedField(name="Leaderboard rank:", value=str(run.place)),
                EmbedField(name="Date played:", value=run.played_date),
            ),
        )

    @staticmethod
    def thumbnail_url(template: str, width: int, height: int) -> str:
        """Substitute the {width}/{height} placeholders of a thumbnail template."""
        return template.replace("{width}", str(width)).replace("{height}", str(height))

    @staticmethod
    def live_embed(
        stream: StreamObservation, width: int = 1280, height: int = 720
    ) -> EmbedSpec:
        """Build the 'now live' announcement for a stream."""
        return EmbedSpec(
            title=stream.title,
            description=(
                f"{stream.broadcaster_display_name} is streaming: {stream.game_name}"
            ),
            color=LIVE_COLOR,
            url=CHANNEL_URL_TEMPLATE.format(login=stream.broadcaster_login),
            thumbnail_url=EmbedFormatter.thumbnail_url(
                stream.thumbnail_url_template, width, height
            ),
        )
