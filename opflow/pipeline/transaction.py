"""
Transaction — declarative base class binding steps, container and overrides.

    class CreateUser(Transaction):
        container = operations

        steps = [
            map_step("process"),
            guard_step("verify"),
            try_step("validate", catch=NotValidError),
            tee_step("persist"),
        ]

        @override
        def verify(self, value, *, parent):
            return parent({**value, "source": "signup"})

    create_user = CreateUser(persist=fake_persist)
    outcome = create_user.call({"name": "Jane", "email": "jane@doe.com"})

The pipeline is built and validated when the subclass is created.
Dependencies are bound per instance; ``call`` keeps no state between runs.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping, Sequence
from typing import Any, ClassVar

from opflow.core.config import settings
from opflow.core.logging import get_logger
from opflow.pipeline.engine import Pipeline
from opflow.pipeline.errors import StepDeclarationError
from opflow.pipeline.events import StepLogListener, Subscription
from opflow.pipeline.matcher import OutcomeMatcher, build_matcher
from opflow.pipeline.outcome import Outcome
from opflow.pipeline.resolver import EMPTY_CONTAINER, OperationResolver, Resolvable, as_container
from opflow.pipeline.step import StepSpec

logger = get_logger(__name__)

_OVERRIDE_ATTR = "__opflow_override__"


def override(target: str | Callable[..., Any] | None = None) -> Any:
    """
    Mark a method as the local override for a step.

    ``@override`` uses the method name as the step name or operation key;
    ``@override("verify")`` names it explicitly.  The method is called as
    ``method(value, *step_args, parent=parent)`` where ``parent`` runs
    the container operation it replaces.
    """
    if callable(target):
        setattr(target, _OVERRIDE_ATTR, target.__name__)
        return target

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        setattr(func, _OVERRIDE_ATTR, target or func.__name__)
        return func

    return decorator


class Transaction:
    """
    Base class for declared pipelines.

    Class attributes:
        container: Operation container (mapping or object with
            ``lookup(key)``), shared by all instances.
        steps: Ordered StepSpecs.
    """

    container: ClassVar[Resolvable | Mapping[str, Callable[..., Any]] | None] = None
    steps: ClassVar[Sequence[StepSpec]] = ()

    pipeline: ClassVar[Pipeline] = Pipeline(name="Transaction")
    _resolved_container: ClassVar[Resolvable] = EMPTY_CONTAINER
    _override_attrs: ClassVar[dict[str, str]] = {}

    def __init_subclass__(cls, **kwargs: Any) -> None:
        super().__init_subclass__(**kwargs)

        # Collected before ``pipeline`` and ``_resolved_container`` are rebound.
        overrides: dict[str, str] = {}
        for klass in reversed(cls.__mro__):
            for attr_name, attr in vars(klass).items():
                key = getattr(attr, _OVERRIDE_ATTR, None)
                if not isinstance(key, str):
                    continue
                if attr_name in _RESERVED_ATTRS:
                    raise StepDeclarationError(
                        f"{cls.__qualname__}.{attr_name} cannot be an override: "
                        f"'{attr_name}' is a Transaction attribute. Name the method "
                        f"differently and use @override({key!r}).",
                        step_name=key,
                        details={"attribute": attr_name},
                    )
                overrides[key] = attr_name
        cls._override_attrs = overrides

        cls.pipeline = Pipeline(cls.steps, name=cls.__qualname__)
        cls._resolved_container = as_container(cls.container)

        duplicates = cls.pipeline.duplicate_step_names()
        if duplicates and settings.WARN_ON_DUPLICATE_STEP_NAMES:
            logger.warning(
                "Duplicate step names declared; failure handlers match the last one",
                transaction=cls.__qualname__,
                step_names=duplicates,
            )

        logger.debug(
            "Transaction declared",
            transaction=cls.__qualname__,
            steps=list(cls.pipeline.step_names),
            overrides=sorted(overrides),
        )

    def __init__(self, **dependencies: Callable[..., Any]) -> None:
        known = set(self.pipeline.step_names) | {spec.operation_key for spec in self.pipeline}
        unknown = sorted(set(dependencies) - known)
        if unknown:
            raise TypeError(
                f"{type(self).__name__}() got dependencies for unknown steps: {', '.join(unknown)}"
            )

        local = {key: getattr(self, attr_name) for key, attr_name in self._override_attrs.items()}
        self.resolver = OperationResolver(
            container=self._resolved_container,
            overrides=local,
            dependencies=dependencies,
        )
        self._subscriptions: list[Subscription] = []
        if settings.LOG_STEP_EVENTS:
            self.subscribe(StepLogListener())

    def subscribe(self, listener: Any, step: str | None = None) -> None:
        """
        Receive step events from every later call.

        Args:
            listener: Object with any of ``on_step_started``,
                ``on_step_succeeded``, ``on_step_failed``.
            step: Only deliver events for this step name.
        """
        if step is not None and step not in self.pipeline.step_names:
            raise ValueError(
                f"Cannot subscribe to undeclared step '{step}' on {type(self).__name__}"
            )
        self._subscriptions.append(Subscription(listener, step))

    def call(
        self,
        value: Any,
        matcher: OutcomeMatcher | Callable[[OutcomeMatcher], Any] | None = None,
        *,
        step_args: Mapping[str, Sequence[Any]] | None = None,
    ) -> Outcome:
        """
        Run the pipeline on ``value``.

        Args:
            value: Value handed to the first step.
            matcher: Optional OutcomeMatcher, or a function that registers
                handlers on a fresh one.  Exactly one matching handler runs.
            step_args: Extra positional arguments keyed by step name.

        Returns:
            The final Outcome, whether or not a matcher was given.
        """
        handlers = build_matcher(matcher) if matcher is not None else None

        outcome = self.pipeline.run(
            value,
            self.resolver,
            step_args=step_args,
            listeners=tuple(self._subscriptions),
        )

        if handlers is not None:
            handlers.dispatch(outcome)
        return outcome

    __call__ = call

    def __repr__(self) -> str:
        return f"<{type(self).__name__} steps={list(self.pipeline.step_names)!r}>"


# Class and instance attributes an override method must not shadow.
_RESERVED_ATTRS = frozenset(vars(Transaction)) | {"resolver", "_subscriptions"}
