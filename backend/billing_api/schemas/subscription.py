from pydantic import BaseModel, Field, StrictBool, StrictInt
from typing import Any, Optional


class RemoveSubscriptionPauseRequest(BaseModel):
    # 必須チェックはサービス層で行う (400 を返すため、ここでは全て任意)
    subscription_id: Optional[str] = Field(default=None, alias="subscriptionId")
    user_id: Optional[str] = Field(default=None, alias="userId")
    message: Optional[str] = None
    # true や "6" を数値/真偽値に変換させない
    is_remove_downgrade: Optional[StrictBool] = Field(default=False, alias="isRemoveDowngrade")
    downgrade_duration: Optional[StrictInt] = Field(default=None, alias="downgradeDuration")

    model_config = {"populate_by_name": True}


class ApiResponse(BaseModel):
    success: bool
    message: str


class ResolverResult(BaseModel):
    """PayPal操作の結果 (例外を投げずに成否を返す)"""

    success: bool
    message: Optional[str] = None
    data: Optional[Any] = None
