"""模型算法注册表模块，提供模型注册、获取与按配置构建的工具。"""

from __future__ import annotations

from typing import Any, Callable, Dict, Mapping, Type

from .base import BaseModel

# 中文说明：全局模型注册表，键为模型名称，值为模型类。
MODEL_REGISTRY: Dict[str, Type[BaseModel]] = {}


def register_model(name: str) -> Callable[[Type[BaseModel]], Type[BaseModel]]:
    """Register a model class under the provided name.

    中文说明：作为装饰器使用，将模型类与名称绑定到注册表，便于通过配置加载。
    """

    def decorator(cls: Type[BaseModel]) -> Type[BaseModel]:
        """Inner decorator that performs the actual registration."""

        # 中文说明：确保被注册对象是 BaseModel 的子类，避免错误使用。
        if not issubclass(cls, BaseModel):
            raise TypeError(f"Model class {cls.__name__} must inherit from BaseModel")
        MODEL_REGISTRY[name] = cls
        return cls

    return decorator


def get_model_class(name: str) -> Type[BaseModel]:
    """Retrieve a registered model class by its name.

    中文说明：根据模型名称返回对应的模型类，若未注册会抛出 KeyError，提醒用户配置错误。
    """

    return MODEL_REGISTRY[name]


def build_model(model_cfg: Mapping[str, Any]) -> BaseModel:
    """Instantiate a model from a ``{"name": ..., "params": {...}}`` mapping.

    中文说明：参数中若包含 ``model`` 且其值为映射（如 Bagging 的原型模型），
    会递归构建该子模型后再传入。
    """

    name = model_cfg.get("name")
    if not name:
        raise ValueError("Model configuration must include a 'name' field")
    try:
        model_cls = get_model_class(name)
    except KeyError as exc:
        raise ValueError(f"Unknown model name: {name}") from exc

    params = dict(model_cfg.get("params") or {})
    prototype = params.get("model")
    if isinstance(prototype, Mapping):
        params["model"] = build_model(prototype)
    return model_cls(**params)


__all__ = ["MODEL_REGISTRY", "register_model", "get_model_class", "build_model"]
