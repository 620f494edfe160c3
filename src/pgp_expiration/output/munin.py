"""
Munin protocol rendering.

Turns a Snapshot into the lines Munin expects on stdout:
- config mode: graph declaration and one field record per identity
- values mode: one value line per identity
"""

from pgp_expiration.models.outcome import Days, Failed, NoExpiration, Snapshot
from pgp_expiration.utils.fieldname import clean_fieldname

GRAPH_TITLE = "OpenPGP key expiration"
GRAPH_VLABEL = "days to expiration"

# Value reported for identities whose resolution failed
FAILED_SENTINEL = -999


def field_name(identity: str) -> str:
    """
    Munin field name of an identity.

    Field names keep the historical leading underscore.
    """
    return f"_{clean_fieldname(identity)}"


class MuninFormatter:
    """Renders snapshots for Munin."""

    def __init__(self, warning: str = "14:", critical: str = "7:"):
        """
        Initialize the formatter.

        Args:
            warning: Warning range for every field (Munin syntax)
            critical: Critical range for every field (Munin syntax)
        """
        self.warning = warning
        self.critical = critical

    def render_config(self, snapshot: Snapshot) -> list[str]:
        """
        Render config mode output.

        Identities without an expiring key are left out. Failed identities
        keep their record, with the failure in extinfo.

        Args:
            snapshot: Outcomes to describe

        Returns:
            Output lines
        """
        lines = [
            f"graph_title {GRAPH_TITLE}",
            f"graph_vlabel {GRAPH_VLABEL}",
        ]

        for outcome in snapshot.outcomes:
            if isinstance(outcome.result, NoExpiration):
                continue

            name = field_name(outcome.identity)
            lines.append(f"{name}.label {outcome.identity}")
            lines.append(f"{name}.warning {self.warning}")
            lines.append(f"{name}.critical {self.critical}")

            if isinstance(outcome.result, Failed):
                # Munin reads one line per attribute
                extinfo = " ".join(outcome.result.message.split())
                lines.append(f"{name}.extinfo {extinfo}")

        return lines

    def render_values(self, snapshot: Snapshot) -> list[str]:
        """
        Render values mode output.

        Args:
            snapshot: Outcomes to report

        Returns:
            Output lines
        """
        lines = []

        for outcome in snapshot.outcomes:
            result = outcome.result
            if isinstance(result, Days):
                value = result.days
            elif isinstance(result, Failed):
                value = FAILED_SENTINEL
            else:
                continue

            lines.append(f"{field_name(outcome.identity)}.value {value}")

        return lines
