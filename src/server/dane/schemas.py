"""
DANE 证书签发服务的数据模型定义。
"""

import ipaddress
import re

from pydantic import BaseModel, ConfigDict, field_validator

# 单个 DNS 标签：字母数字开头结尾，中间允许连字符，最长 63
_DNS_LABEL = re.compile(r"^(?!-)[A-Za-z0-9-]{1,63}(?<!-)$")


class AlgorithmProfile(BaseModel):
    """
    证书签名算法配置（进程级常量，不可变）。
    """
    model_config = ConfigDict(frozen=True)

    name: str = "RSASSA-PKCS1-v1_5"
    hash: str = "SHA-256"
    modulus_length: int = 2048
    public_exponent: int = 65537
    serial_length: int = 18


class IssuanceRequest(BaseModel):
    """
    客户端请求签发证书时的数据模型。
    """
    domain: str
    ip: str

    @field_validator("domain")
    @classmethod
    def validate_domain(cls, value: str) -> str:
        """校验域名并转为小写：总长度不超过 253，各标签符合 LDH 规则。"""
        domain = value.strip().rstrip(".").lower()
        if not domain or len(domain) > 253:
            raise ValueError(f"无效的域名: {value}")
        if not all(_DNS_LABEL.match(label) for label in domain.split(".")):
            raise ValueError(f"无效的域名: {value}")
        return domain

    @field_validator("ip")
    @classmethod
    def validate_ip(cls, value: str) -> str:
        """校验 IP 地址，自动识别 IPv4 / IPv6。"""
        try:
            return str(ipaddress.ip_address(value.strip()))
        except ValueError:
            raise ValueError(f"无效的 IP 地址: {value}")


class IssuanceResponse(BaseModel):
    """
    服务端返回签发结果的数据模型。
    """
    message: str
    tlsa: str  # 形如 "3 1 2 <sha512 hex>"


class InfoResponse(BaseModel):
    message: str
