"""Commission rule repository - REST calls against the promotions API"""

from ...api_client import ApiClient
from .schemas import CommissionRule

COMMISSIONS_PATH = "/api/promotions/commissions"


class CommissionRepository:
    """Repository for commission rule API operations"""

    @staticmethod
    async def get_all(api: ApiClient, entity_id: str) -> list[CommissionRule]:
        """Get all commission rules of a business, in server order"""
        payload = await api.get(COMMISSIONS_PATH, {"entityId": entity_id})
        return [CommissionRule.model_validate(rule) for rule in payload or []]

    @staticmethod
    async def get_active(api: ApiClient, entity_id: str) -> list[CommissionRule]:
        payload = await api.get(f"{COMMISSIONS_PATH}/active", {"entityId": entity_id})
        return [CommissionRule.model_validate(rule) for rule in payload or []]

    @staticmethod
    async def get_by_id(api: ApiClient, rule_id: str) -> CommissionRule:
        payload = await api.get(f"{COMMISSIONS_PATH}/{rule_id}")
        return CommissionRule.model_validate(payload)
