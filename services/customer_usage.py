from abc import ABC, abstractmethod


class CustomerUsageCounter(ABC):
    """
    Per-client usage history, injected into the discount engine.

    Enforcing usage_limit_per_customer needs to know how often a client has
    already used a rule, which lives in the usage store. The engine only asks
    through this port, keeping the calculation itself free of I/O.
    """

    @abstractmethod
    def count_for_client(self, rule_id: int, client_id: int) -> int:
        """Number of committed invoices on which client_id used rule_id."""
        ...
