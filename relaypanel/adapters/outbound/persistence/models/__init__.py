from relaypanel.adapters.outbound.persistence.models.client_record import ClientRecord

__all__ = ["ClientRecord"]
