from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CopilotAction:
    id: str
    label: str
    prompt: str


COPILOT_ACTIONS: tuple[CopilotAction, ...] = (
    CopilotAction(
        id="analyze-portfolio",
        label="Analyze Portfolio",
        prompt=(
            "Analyze my portfolio. Scan my wallet, detect idle assets, risk exposure, "
            "and yield sources."
        ),
    ),
    CopilotAction(
        id="suggest-strategies",
        label="Suggest Strategies",
        prompt=(
            "Suggest DeFi strategies based on my current holdings and preferences. "
            "Design 2-3 optimal DeFi moves with APY estimates."
        ),
    ),
    CopilotAction(
        id="optimize-yields",
        label="Optimize Yields",
        prompt=(
            "Optimize my yields. Run yield optimizer and smart routing engine to find "
            "better routes and opportunities."
        ),
    ),
    CopilotAction(
        id="discover-opportunities",
        label="Discover Opportunities",
        prompt=(
            "Discover new opportunities. Show me trending Polygon protocols, new farms, "
            "and high-yield pools."
        ),
    ),
    CopilotAction(
        id="copy-trade",
        label="Copy Trade",
        prompt=(
            "Show me top wallet strategies to mirror. Find wallets with successful DeFi "
            "positions that I could copy."
        ),
    ),
)


def get_copilot_action(action_id: str) -> CopilotAction:
    for action in COPILOT_ACTIONS:
        if action.id == action_id:
            return action
    known = ", ".join(a.id for a in COPILOT_ACTIONS)
    raise KeyError(f"unknown copilot action {action_id!r} (known: {known})")
