from declarative_find.controller.base import Controller
from declarative_find.controller.decorators import action
from declarative_find.controller.descriptor import ControllerDescriptor
from declarative_find.controller.router import build_controller_router

__all__ = [
    "Controller",
    "ControllerDescriptor",
    "action",
    "build_controller_router",
]
