"""
Async REST client for the rooms/products/designs service.

Every route answers with a {success, data|message} envelope; the client
unwraps it and raises APIError for anything that is not a success.
"""

import logging
from typing import Any, List, Optional

import httpx

from .config import API_URL, API_TIMEOUT
from .models import Design, FurnitureTemplate, Room
from .store import DesignSession

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Error talking to the persistence service."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class DesignClient:
    def __init__(
        self,
        base_url: str = API_URL,
        timeout: float = API_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def _request(self, method: str, path: str, **kwargs) -> Any:
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
            follow_redirects=True
        ) as client:
            try:
                response = await client.request(method, path, **kwargs)
            except httpx.TimeoutException:
                raise APIError(f"{method} {path} timed out")
            except httpx.RequestError as e:
                raise APIError(f"{method} {path} request error: {str(e)}")

        try:
            body = response.json()
        except ValueError:
            raise APIError(
                f"{method} {path} returned non-JSON response ({response.status_code})",
                response.status_code
            )

        if response.is_error or not body.get("success", False):
            message = body.get("message") or f"{method} {path} failed"
            logger.warning(f"{method} {path} failed ({response.status_code}): {message}")
            raise APIError(message, response.status_code)

        return body.get("data")

    # ============ Products ============

    async def get_products(self, category: Optional[str] = None) -> List[FurnitureTemplate]:
        params = {"category": category} if category else None
        data = await self._request("GET", "/products/", params=params)
        return [FurnitureTemplate.model_validate(item) for item in data]

    async def get_product(self, product_id: str) -> FurnitureTemplate:
        return FurnitureTemplate.model_validate(await self._request("GET", f"/products/{product_id}"))

    # ============ Rooms ============

    async def get_user_rooms(self, user_id: str) -> List[Room]:
        data = await self._request("GET", "/rooms/", params={"userId": user_id})
        return [Room.model_validate(item) for item in data]

    async def get_room(self, room_id: str) -> Room:
        return Room.model_validate(await self._request("GET", f"/rooms/{room_id}"))

    async def create_room(self, room: Room) -> Room:
        payload = room.model_dump(mode="json", exclude={"createdAt", "updatedAt"}, exclude_none=True)
        return Room.model_validate(await self._request("POST", "/rooms/", json=payload))

    async def update_room(self, room_id: str, fields: dict) -> Room:
        return Room.model_validate(await self._request("PUT", f"/rooms/{room_id}", json=fields))

    async def delete_room(self, room_id: str):
        await self._request("DELETE", f"/rooms/{room_id}")

    # ============ Designs ============

    async def get_user_designs(self, user_id: str) -> List[Design]:
        data = await self._request("GET", "/designs/", params={"userId": user_id})
        return [Design.model_validate(item) for item in data]

    async def get_design(self, design_id: str) -> Design:
        return Design.model_validate(await self._request("GET", f"/designs/{design_id}"))

    async def create_design(self, design: Design) -> Design:
        payload = design.model_dump(mode="json", exclude={"createdAt", "updatedAt"}, exclude_none=True)
        return Design.model_validate(await self._request("POST", "/designs/", json=payload))

    async def update_design(self, design_id: str, design: Design) -> Design:
        payload = design.model_dump(
            mode="json",
            include={"name", "roomId", "furniture", "roomDetails"},
            exclude_none=True
        )
        return Design.model_validate(await self._request("PUT", f"/designs/{design_id}", json=payload))

    async def delete_design(self, design_id: str, session: Optional[DesignSession] = None):
        """Delete a design. A session bound to it is unbound, so its next save creates a new one."""
        await self._request("DELETE", f"/designs/{design_id}")
        if session is not None and session.current_design and session.current_design.id == design_id:
            session.bind_design(None)
            logger.info(f"Unbound deleted design {design_id} from session")

    async def save_design(self, design: Design) -> Design:
        """Create the design, or overwrite it when it already has an id."""
        if design.id:
            return await self.update_design(design.id, design)
        return await self.create_design(design)

    # ============ Sessions ============

    async def load_catalog(self, session: DesignSession):
        session.load_catalog(await self.get_products())

    async def open_design(self, session: DesignSession, design_id: str) -> Design:
        design = await self.get_design(design_id)
        session.load_design(design)
        return design

    async def save_session(self, session: DesignSession, name: str) -> Design:
        """Snapshot the session, persist it and bind the stored copy."""
        saved = await self.save_design(session.serialize_design(name))
        session.bind_design(saved)
        logger.info(f"Saved design {saved.id} ({name})")
        return saved
