"""
DANE 证书签发服务的业务逻辑层。
此模块封装了核心逻辑，提供更清晰的接口供路由层调用。
"""

from pathlib import Path
from typing import Any, List

from cryptography.hazmat.primitives import serialization
from loguru import logger
from pydantic import ValidationError

from . import core
from .schemas import IssuanceRequest, IssuanceResponse, InfoResponse
from ..config import config

MISSING_DATA_MESSAGE = "缺少数据！需要同时提供 domain 与 ip"
WEIRD_DATA_MESSAGE = "数据格式异常！domain 与 ip 必须为字符串"


def info_service() -> InfoResponse:
    return InfoResponse(message="向此地址发送 POST 请求以生成证书。")


def parse_issuance_request(payload: Any) -> IssuanceRequest:
    """
    将原始 JSON 请求体校验为 IssuanceRequest。
    :param payload: 已解析的 JSON 对象。
    :return: 校验后的请求对象。
    :raises ValueError: 如果缺少字段、类型不是字符串或格式不合法。
    """
    if not isinstance(payload, dict):
        raise ValueError(WEIRD_DATA_MESSAGE)

    domain = payload.get("domain")
    ip = payload.get("ip")
    if not domain or not ip:
        raise ValueError(MISSING_DATA_MESSAGE)
    if not isinstance(domain, str) or not isinstance(ip, str):
        raise ValueError(WEIRD_DATA_MESSAGE)

    try:
        return IssuanceRequest(domain=domain, ip=ip)
    except ValidationError as e:
        # 只取第一个错误的描述，去掉 pydantic 的 "Value error, " 前缀
        message = e.errors()[0]["msg"].removeprefix("Value error, ")
        raise ValueError(message)


def _remove_partial(paths: List[Path]) -> None:
    for path in paths:
        try:
            path.unlink(missing_ok=True)
        except OSError as e:
            logger.warning(f"清理未完成的证书文件失败 {path}: {e}")


def issue_certificate_service(
    req: IssuanceRequest, base_dir: str | Path | None = None
) -> IssuanceResponse:
    """
    处理签发证书的业务逻辑：生成密钥 -> 构造证书 -> 写证书 -> 写私钥 -> 计算 TLSA。
    同一域名的签发串行执行，已存在的证书与私钥会被覆盖。
    :param req: 校验后的请求对象。
    :param base_dir: 证书根目录，默认取配置中的 certificates_dir。
    :return: 包含提示信息和 TLSA 值的响应对象。
    :raises ValueError: 如果域名无法映射为安全的路径。
    :raises RuntimeError: 如果密钥生成、签名、写文件或 TLSA 计算失败。
    """
    paths = core.domain_paths(req.domain, base_dir or config.certificates_dir)
    profile = config.algorithm_profile()

    with core.domain_lock(req.domain):
        written: List[Path] = []
        try:
            key_pair = core.generate_key_pair(profile)
            cert = core.synthesize_certificate(req.domain, req.ip, key_pair, profile)

            cert_pem = cert.public_bytes(serialization.Encoding.PEM).decode("ascii")
            written.append(paths["cert"])
            core.write_file(paths["cert"], cert_pem)

            written.append(paths["key"])
            core.write_file(paths["key"], core.encode_private_key(key_pair.private_key))

            tlsa = core.compute_tlsa(paths["cert"], backend=config.tlsa_backend)
        except RuntimeError:
            _remove_partial(written)
            raise
        except Exception as e:
            # 请求已通过校验，此后的任何异常都属于服务端错误
            _remove_partial(written)
            logger.error(f"签发 {req.domain} 时发生未预期的错误: {e}")
            raise RuntimeError(f"签发过程异常: {e}") from e

    logger.info(f"DONE  | {req.domain}")
    return IssuanceResponse(message=f"已为 {req.domain} 创建证书！", tlsa=tlsa)


def issue_from_payload_service(payload: Any) -> IssuanceResponse:
    """校验原始请求体并签发证书。"""
    return issue_certificate_service(parse_issuance_request(payload))

