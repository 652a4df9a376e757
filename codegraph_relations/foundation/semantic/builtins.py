"""
Java Builtin Table

Well-known JDK names resolved without the JDK on the path. `java.lang` is
implicitly imported; the other entries are a fallback used only after
imports, the current package and wildcard imports had no answer.
"""

from ..ir.models import SymbolKind

C = SymbolKind.CLASS
I = SymbolKind.INTERFACE  # noqa: E741
E = SymbolKind.ENUM
A = SymbolKind.ANNOTATION_TYPE

PRIMITIVE_TYPES = frozenset({"byte", "short", "int", "long", "float", "double", "boolean", "char", "void"})

JAVA_LANG: dict[str, SymbolKind] = {
    "Object": C,
    "String": C,
    "System": C,
    "Math": C,
    "StrictMath": C,
    "Integer": C,
    "Long": C,
    "Double": C,
    "Float": C,
    "Boolean": C,
    "Byte": C,
    "Character": C,
    "Short": C,
    "Void": C,
    "Number": C,
    "Class": C,
    "ClassLoader": C,
    "Thread": C,
    "ThreadLocal": C,
    "StringBuilder": C,
    "StringBuffer": C,
    "Enum": C,
    "Record": C,
    "Runtime": C,
    "Process": C,
    "Throwable": C,
    "Exception": C,
    "RuntimeException": C,
    "Error": C,
    "AssertionError": C,
    "OutOfMemoryError": C,
    "StackOverflowError": C,
    "StackTraceElement": C,
    "NullPointerException": C,
    "IllegalArgumentException": C,
    "IllegalStateException": C,
    "IndexOutOfBoundsException": C,
    "ArrayIndexOutOfBoundsException": C,
    "UnsupportedOperationException": C,
    "ArithmeticException": C,
    "ClassCastException": C,
    "NumberFormatException": C,
    "SecurityException": C,
    "InterruptedException": C,
    "CloneNotSupportedException": C,
    "ReflectiveOperationException": C,
    "ClassNotFoundException": C,
    "Iterable": I,
    "AutoCloseable": I,
    "Runnable": I,
    "Comparable": I,
    "CharSequence": I,
    "Cloneable": I,
    "Appendable": I,
    "Readable": I,
    "Override": A,
    "Deprecated": A,
    "SuppressWarnings": A,
    "SafeVarargs": A,
    "FunctionalInterface": A,
}

_PACKAGES: dict[str, dict[str, SymbolKind]] = {
    "java.util": {
        "Collection": I,
        "List": I,
        "ArrayList": C,
        "LinkedList": C,
        "Set": I,
        "HashSet": C,
        "LinkedHashSet": C,
        "TreeSet": C,
        "Map": I,
        "HashMap": C,
        "TreeMap": C,
        "LinkedHashMap": C,
        "Queue": I,
        "Deque": I,
        "ArrayDeque": C,
        "Iterator": I,
        "Optional": C,
        "Arrays": C,
        "Collections": C,
        "Objects": C,
        "UUID": C,
        "Date": C,
        "Scanner": C,
        "Properties": C,
        "Random": C,
        "Comparator": I,
        "NoSuchElementException": C,
        "ConcurrentModificationException": C,
    },
    "java.util.function": {
        "Function": I,
        "BiFunction": I,
        "Consumer": I,
        "BiConsumer": I,
        "Supplier": I,
        "Predicate": I,
        "BiPredicate": I,
        "UnaryOperator": I,
        "BinaryOperator": I,
    },
    "java.util.stream": {
        "Stream": I,
        "Collectors": C,
        "IntStream": I,
    },
    "java.util.concurrent": {
        "Callable": I,
        "ExecutorService": I,
        "Executors": C,
        "Future": I,
        "CompletableFuture": C,
        "ConcurrentHashMap": C,
        "TimeUnit": E,
    },
    "java.io": {
        "IOException": C,
        "UncheckedIOException": C,
        "FileNotFoundException": C,
        "PrintStream": C,
        "InputStream": C,
        "OutputStream": C,
        "File": C,
        "FileInputStream": C,
        "FileOutputStream": C,
        "FileReader": C,
        "BufferedReader": C,
        "Reader": C,
        "Writer": C,
        "Serializable": I,
        "Closeable": I,
    },
    "java.sql": {
        "SQLException": C,
        "Connection": I,
    },
    "java.time": {
        "LocalDate": C,
        "LocalDateTime": C,
        "Duration": C,
        "Instant": C,
    },
    "java.lang.annotation": {
        "Retention": A,
        "Target": A,
        "Documented": A,
        "Inherited": A,
        "Repeatable": A,
        "RetentionPolicy": E,
        "ElementType": E,
    },
}

BUILTIN_TYPES: dict[str, tuple[str, SymbolKind]] = {}
for _package, _names in _PACKAGES.items():
    for _name, _kind in _names.items():
        BUILTIN_TYPES.setdefault(_name, (f"{_package}.{_name}", _kind))

KNOWN_PACKAGES: dict[str, dict[str, SymbolKind]] = {"java.lang": JAVA_LANG, **_PACKAGES}

# Static fields whose type matters for receiver resolution (System.out.println)
BUILTIN_FIELDS: dict[str, dict[str, str]] = {
    "java.lang.System": {
        "out": "java.io.PrintStream",
        "err": "java.io.PrintStream",
        "in": "java.io.InputStream",
    },
    "java.lang.Integer": {"MAX_VALUE": "int", "MIN_VALUE": "int"},
    "java.lang.Long": {"MAX_VALUE": "long", "MIN_VALUE": "long"},
    "java.lang.Math": {"PI": "double", "E": "double"},
}

# Return types of a handful of hot JDK methods, so chained calls keep a receiver type
BUILTIN_METHOD_RETURNS: dict[str, dict[str, str]] = {
    "java.lang.Object": {
        "toString": "java.lang.String",
        "getClass": "java.lang.Class",
        "hashCode": "int",
        "equals": "boolean",
    },
    "java.lang.String": {
        "trim": "java.lang.String",
        "toUpperCase": "java.lang.String",
        "toLowerCase": "java.lang.String",
        "substring": "java.lang.String",
        "length": "int",
        "isEmpty": "boolean",
    },
    "java.lang.StringBuilder": {"append": "java.lang.StringBuilder", "toString": "java.lang.String"},
}

OBJECT_METHODS = frozenset({"toString", "getClass", "hashCode", "equals", "clone", "finalize", "notify", "notifyAll", "wait"})

UNCHECKED_EXCEPTIONS = frozenset(
    {
        "java.lang.RuntimeException",
        "java.lang.Error",
        "java.lang.AssertionError",
        "java.lang.OutOfMemoryError",
        "java.lang.StackOverflowError",
        "java.lang.NullPointerException",
        "java.lang.IllegalArgumentException",
        "java.lang.IllegalStateException",
        "java.lang.IndexOutOfBoundsException",
        "java.lang.ArrayIndexOutOfBoundsException",
        "java.lang.UnsupportedOperationException",
        "java.lang.ArithmeticException",
        "java.lang.ClassCastException",
        "java.lang.NumberFormatException",
        "java.lang.SecurityException",
        "java.io.UncheckedIOException",
        "java.util.NoSuchElementException",
        "java.util.ConcurrentModificationException",
    }
)


def java_lang(name: str) -> tuple[str, SymbolKind] | None:
    kind = JAVA_LANG.get(name)
    return (f"java.lang.{name}", kind) if kind else None


def builtin_type(name: str) -> tuple[str, SymbolKind] | None:
    return BUILTIN_TYPES.get(name)


def in_known_package(package: str, name: str) -> tuple[str, SymbolKind] | None:
    """Resolve `name` through a wildcard import of a known JDK package."""
    kind = KNOWN_PACKAGES.get(package, {}).get(name)
    return (f"{package}.{name}", kind) if kind else None


def kind_of_builtin(qualified_name: str) -> SymbolKind | None:
    package, _, name = qualified_name.rpartition(".")
    return KNOWN_PACKAGES.get(package, {}).get(name)
