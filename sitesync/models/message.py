import msgspec
import orjson


class Message(msgspec.Struct, kw_only=True):

    @classmethod
    def load(cls, data: bytes):
        return msgspec.convert(
            orjson.loads(data),
            type=cls,
        )

    def dump(self) -> bytes:
        return orjson.dumps(
            msgspec.to_builtins(self)
        )
