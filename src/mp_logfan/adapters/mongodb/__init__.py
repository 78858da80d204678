"""MongoDB adapter – database sink receiver."""
from mp_logfan.adapters.mongodb.receiver import MongoLogReceiver

__all__ = ["MongoLogReceiver"]
