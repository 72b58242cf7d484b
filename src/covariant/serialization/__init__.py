from ._deserialize import deserialize, deserialize_scalar
from ._exceptions import CannotSerializeError, WrongFormatError
from ._serialize import serialize, serialize_scalar
