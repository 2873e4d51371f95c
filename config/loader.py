"""
配置加载器
读取根目录下的 config.yaml，并用可选的 user_config.yaml 按节覆盖。
"""
import yaml
import os
import sys
import copy
import logging

from core.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

def get_resource_path(relative_path: str) -> str:
    """
    获取资源的正确路径 (兼容 PyInstaller 打包后的临时目录)
    """
    try:
        base_path = sys._MEIPASS
    except Exception:
        base_path = os.path.abspath(".")

    return os.path.join(base_path, relative_path)

CONFIG_PATH = get_resource_path("config.yaml")
USER_CONFIG_PATH = get_resource_path("user_config.yaml")

DEFAULT_CONFIG = {
    "generation": {
        "endpoint_url": "https://groqprompt.netlify.app/api/ai",
        "timeout_seconds": 60,
    },
    "export": {
        "filename_template": "FreelanceFlow_{persona}.docx",
    },
}

# 允许用户配置覆盖的节
MERGEABLE_SECTIONS = ("generation", "export")

def _merge_configs(base_config: dict, user_config: dict) -> dict:
    """
    合并基础配置和用户配置。
    用户配置中的各节按键覆盖或扩展基础配置，未出现的键保持不变。
    """
    merged_config = copy.deepcopy(base_config)

    for section in MERGEABLE_SECTIONS:
        if section in user_config:
            merged_config[section] = merged_config.get(section) or {}
            merged_config[section].update(user_config[section] or {})

    return merged_config

def _read_yaml(path: str) -> dict:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        logger.error(f"解析 {path} 文件失败: {e}", exc_info=True)
        raise ConfigurationError(f"错误: 解析 {path} 文件失败: {e}")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"错误: {path} 的顶层必须是映射 (mapping)。")
    return data

def load_user_config(path: str = None) -> dict:
    """
    加载并解析 user_config.yaml 文件，不存在时返回空字典。
    """
    path = path or USER_CONFIG_PATH
    if not os.path.exists(path):
        return {}
    return _read_yaml(path)

def load_config(path: str = None, user_path: str = None) -> dict:
    """
    加载并解析 config.yaml 和 user_config.yaml 文件，并进行合并。
    基础配置文件缺失时使用内置默认值。
    """
    path = path or CONFIG_PATH
    if os.path.exists(path):
        base_config = _merge_configs(DEFAULT_CONFIG, _read_yaml(path))
    else:
        logger.warning(f"配置文件 {path} 未找到，使用默认配置。")
        base_config = copy.deepcopy(DEFAULT_CONFIG)

    user_config = load_user_config(user_path)
    return _merge_configs(base_config, user_config)

def get_generation_settings(config: dict) -> dict:
    """
    校验并返回生成服务相关配置。

    Returns:
        dict: {"endpoint_url": str, "timeout_seconds": float}

    Raises:
        ConfigurationError: 地址不是 http(s) URL 或超时不是正数。
    """
    section = config.get("generation") or {}
    endpoint_url = section.get("endpoint_url")
    if not isinstance(endpoint_url, str) or not endpoint_url.startswith(("http://", "https://")):
        raise ConfigurationError(f"错误: generation.endpoint_url 必须是 http(s) 地址，当前为 {endpoint_url!r}。")

    timeout = section.get("timeout_seconds", DEFAULT_CONFIG["generation"]["timeout_seconds"])
    if isinstance(timeout, bool) or not isinstance(timeout, (int, float)) or timeout <= 0:
        raise ConfigurationError(f"错误: generation.timeout_seconds 必须是正数，当前为 {timeout!r}。")

    return {"endpoint_url": endpoint_url, "timeout_seconds": float(timeout)}

def get_export_settings(config: dict) -> dict:
    """返回导出相关配置，文件名模板必须包含 {persona} 占位符。"""
    section = config.get("export") or {}
    template = section.get("filename_template", DEFAULT_CONFIG["export"]["filename_template"])
    if not isinstance(template, str) or "{persona}" not in template:
        raise ConfigurationError(f"错误: export.filename_template 必须包含 {{persona}}，当前为 {template!r}。")
    return {"filename_template": template}
