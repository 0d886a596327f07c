from typing import Any, Dict, List, Optional

from pydantic import BaseModel


class APIErrorResponse(BaseModel):
    error: str
    details: Optional[List[Dict[str, Any]]] = None
