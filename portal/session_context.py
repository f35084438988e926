from dataclasses import dataclass, field, replace

from portal.constants import (
    DEFAULT_ALLOCATION,
    DEFAULT_INITIAL_INVESTMENT,
    DEFAULT_MONTHLY_CONTRIBUTION,
    DEFAULT_PRESET,
    DEFAULT_PROJECTION_YEARS,
    DEFAULT_TARGET_CAGR,
)
from portal.models import PortfolioState, ResearchState


def _default_portfolio() -> PortfolioState:
    return PortfolioState(
        allocation=DEFAULT_ALLOCATION,
        target_cagr=DEFAULT_TARGET_CAGR,
        initial_investment=DEFAULT_INITIAL_INVESTMENT,
        monthly_contribution=DEFAULT_MONTHLY_CONTRIBUTION,
        years=DEFAULT_PROJECTION_YEARS,
        preset=DEFAULT_PRESET,
    )


@dataclass
class SessionContext:
    """
    Holds the state of a single dashboard session.

    The held states are immutable; handlers swap in new ones via
    :meth:`update_portfolio` / :meth:`update_research` so no engine ever
    sees a partially-updated object.
    """
    portfolio: PortfolioState = field(default_factory=_default_portfolio)
    research: ResearchState = field(default_factory=ResearchState)
    done: bool = False

    def update_portfolio(self, **changes) -> PortfolioState:
        self.portfolio = replace(self.portfolio, **changes)
        return self.portfolio

    def update_research(self, **changes) -> ResearchState:
        self.research = replace(self.research, **changes)
        return self.research

    def is_complete(self) -> bool:
        """Return True once the user has quit."""
        return self.done

    def reset(self):
        """Reset the session to its initial state."""
        self.__init__()
