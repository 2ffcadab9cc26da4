from counter_contract.models import ContractState, Event, Request, Response

__version__ = "1.0.0"

__all__ = ["ContractState", "Event", "Request", "Response", "__version__"]
