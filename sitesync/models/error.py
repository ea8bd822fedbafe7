import traceback as tb

import msgspec


class Error(msgspec.Struct):
    message: str
    traceback: str
    node: str

    @classmethod
    def from_exception(cls, err: BaseException, node: str) -> "Error":
        return cls(
            message=str(err),
            traceback="".join(
                tb.format_exception(type(err), err, err.__traceback__)
            ),
            node=node,
        )
