"""
DANE 证书签发服务的 FastAPI 路由定义。
"""

from typing import Any

from fastapi import APIRouter, Body, HTTPException, status
from . import services
from .schemas import IssuanceResponse, InfoResponse

router = APIRouter(prefix="/api", tags=["DANE Certificates"])


@router.get("", response_model=InfoResponse)
async def get_info() -> InfoResponse:
    """
    提示客户端使用 POST 请求签发证书。
    """
    return services.info_service()


@router.post("", response_model=IssuanceResponse, status_code=status.HTTP_201_CREATED)
def issue_certificate(payload: Any = Body(default=None)) -> IssuanceResponse:
    """
    签发自签名证书与私钥，并返回对应的 TLSA 记录值。
    """
    # 同步路由，由线程池执行
    try:
        return services.issue_from_payload_service(payload)
    except ValueError as e:
        # 请求数据缺失、类型错误或格式不合法，返回 400
        raise HTTPException(status_code=400, detail=str(e))
    except RuntimeError as e:
        # 密钥、签名、写文件或 TLSA 计算失败，返回 500
        raise HTTPException(status_code=500, detail=f"证书签发失败: {str(e)}")
    except Exception as e:
        # 捕获所有未预期的错误并返回 500
        raise HTTPException(status_code=500, detail=f"内部服务器错误: {str(e)}")
