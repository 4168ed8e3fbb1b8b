from orgchat.setup.ioc.container import ChatProvider, create_container

__all__ = ["ChatProvider", "create_container"]
