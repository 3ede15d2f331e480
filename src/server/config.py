"""
配置加载模块：支持 .env、环境变量、工作目录 config.json（或 CONFIG_FILE 指定）多来源合并。
公开接口：
- Config: 读取配置的设置类
- config: Config 的单例实例
内部方法：
- Config.settings_customise_sources: 自定义配置来源顺序
- Config.normalize_tlsa_backend: 规范化 TLSA 计算后端名称
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Literal, Tuple

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict, PydanticBaseSettingsSource

from src.server.dane.schemas import AlgorithmProfile


class Config(BaseSettings):
    certificates_dir: str = "certificates"
    server_host: str = "0.0.0.0"
    server_port: int = 2588
    log_level: str = "INFO"

    # 证书算法参数
    key_size: int = 2048
    public_exponent: int = 65537
    signature_hash: Literal["SHA-256", "SHA-384", "SHA-512"] = "SHA-256"
    serial_length: int = 18

    # native: 进程内 cryptography 计算；openssl: 调用 openssl | xxd 管道
    tlsa_backend: Literal["native", "openssl"] = "native"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("tlsa_backend", mode="before")
    @classmethod
    def normalize_tlsa_backend(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower()
        return value

    @field_validator("key_size")
    @classmethod
    def check_key_size(cls, value: int) -> int:
        if value < 2048:
            raise ValueError("key_size 不能小于 2048")
        return value

    @field_validator("serial_length")
    @classmethod
    def check_serial_length(cls, value: int) -> int:
        # X.509 序列号最长 20 字节，且需为正数（最高位可能补 0x00）
        if not 1 <= value <= 19:
            raise ValueError("serial_length 必须在 1 到 19 之间")
        return value

    def algorithm_profile(self) -> AlgorithmProfile:
        """根据当前配置构造不可变的算法配置。"""
        return AlgorithmProfile(
            hash=self.signature_hash,
            modulus_length=self.key_size,
            public_exponent=self.public_exponent,
            serial_length=self.serial_length,
        )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings,
        env_settings,
        dotenv_settings,
        file_secret_settings,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        """自定义配置来源顺序：入参 > 环境变量 > .env > config.json > secrets。"""

        class JsonFileSettingsSource(PydanticBaseSettingsSource):
            """从工作目录的 config.json（或 CONFIG_FILE 指定路径）加载配置的自定义 Source。"""

            def __init__(self, settings_cls):
                super().__init__(settings_cls)
                self._data: Dict[str, Any] | None = None

            def _load(self) -> None:
                if self._data is not None:
                    return
                cfg_path = os.environ.get("CONFIG_FILE")
                path = Path(cfg_path) if cfg_path else Path.cwd() / "config.json"
                if not path.exists():
                    self._data = {}
                    return
                try:
                    with path.open("r", encoding="utf-8") as f:
                        data = json.load(f)
                    self._data = data if isinstance(data, dict) else {}
                except (OSError, ValueError):
                    self._data = {}

            def __call__(self) -> Dict[str, Any]:
                self._load()
                return dict(self._data or {})

            def get_field_value(self, field, field_name):  # type: ignore[override]
                """为满足抽象基类要求，按字段名返回字段值。"""
                self._load()
                data = self._data or {}
                if field_name in data:
                    return data[field_name], field_name, True
                return None, field_name, False

        return (
            init_settings,
            env_settings,
            dotenv_settings,
            JsonFileSettingsSource(settings_cls),
            file_secret_settings,
        )


config = Config()
