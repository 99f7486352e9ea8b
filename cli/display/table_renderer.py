"""Table renderer for team feeds and configuration."""

from dataclasses import dataclass

from rich.table import Table

from cli.display.console import console


@dataclass
class TeamFeedInfo:
    """Feed URLs of one team for display."""

    team_id: str
    name: str | None
    custom_name: str | None
    remove_opponent_names: bool
    all_url: str
    games_url: str

    @classmethod
    def from_listing(cls, entry: dict) -> "TeamFeedInfo":
        """Build from one entry of a calendar listing."""
        return cls(
            team_id=entry["id"],
            name=entry.get("name"),
            custom_name=entry.get("customName"),
            remove_opponent_names=entry.get("removeOpponentNames", False),
            all_url=entry["calendars"]["all"],
            games_url=entry["calendars"]["games"],
        )


class TableRenderer:
    """Render tables using Rich's Table class."""

    def render_teams(self, email: str | None, teams: list[TeamFeedInfo]) -> None:
        """Render the owner's teams with their feed URLs."""
        if not teams:
            console.print("No active teams found")
            return

        console.print(f"Teams for [cyan]{email or 'unknown user'}[/cyan]:")
        table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
        table.add_column("ID", style="dim", no_wrap=True)
        table.add_column("TEAM")
        table.add_column("ALL EVENTS", no_wrap=True)
        table.add_column("GAMES ONLY", no_wrap=True)

        for team in teams:
            label = team.name or "[dim]unnamed[/dim]"
            if team.custom_name:
                label = f"{team.custom_name} [dim]({team.name})[/dim]"
            if team.remove_opponent_names:
                label += " [dim]· no opponents[/dim]"
            table.add_row(team.team_id, label, team.all_url, team.games_url)

        console.print(table)

    def render_settings(self, sections: list[tuple[str, list[tuple[str, str, str]]]]) -> None:
        """Render configuration sections of (setting, source, value) rows."""
        all_rows = [row for _, rows in sections for row in rows]
        setting_width = max([len("SETTING")] + [len(row[0]) for row in all_rows])
        source_width = max([len("SOURCE")] + [len(row[1]) for row in all_rows])

        for section_name, rows in sections:
            console.print(f"\n[bold]{section_name}:[/bold]")
            table = Table(show_header=True, header_style="bold", box=None, padding=(0, 2))
            table.add_column("SETTING", style="cyan", min_width=setting_width, no_wrap=True)
            table.add_column("SOURCE", style="dim", min_width=source_width, no_wrap=True)
            table.add_column("VALUE")
            for setting, source, value in rows:
                table.add_row(setting, source, value)
            console.print(table)

        console.print()
