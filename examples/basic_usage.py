"""Basic usage example for J2J Studio.

This example drives a studio session from code: it loads the bundled
rating chain, waits for both buffers to validate and runs the transform.

Before running, start a transform service and point the client at it:
    export J2J_STUDIO_SERVICE__BASE_URL=http://localhost:8080
"""

import asyncio

from j2j_studio.core.types import StatusLevel
from j2j_studio.session.events import StudioEventType
from j2j_studio.session.studio import StudioSession

INPUT = """{
  "rating": {
    "primary": {"value": 3},
    "quality": {"value": 3}
  }
}"""

SPEC = """[
  {
    "operation": "shift",
    "spec": {
      "rating": {
        "primary": {"value": "Rating"},
        "*": {
          "value": "SecondaryRatings.&1.Value",
          "Id": "SecondaryRatings.&1.Id"
        }
      }
    }
  },
  {
    "operation": "default",
    "spec": {
      "RatingRange": 5,
      "SecondaryRatings": {"*": {"Range": 5}}
    }
  }
]"""


async def main() -> None:
    """Validate and transform the sample chain."""

    async with StudioSession(auto_transform=True) as session:
        session.bus.register(
            StudioEventType.NOTICE,
            lambda event: print(f"[{event.level.value}] {event.message}"),
        )

        print("=" * 60)
        print(f"J2J Studio against {session.client.base_url}")
        print("=" * 60)

        # Auto-transform fires once both buffers come back valid
        await session.set_input(INPUT)
        await session.set_spec(SPEC)
        await session.settle()

        store = session.store
        print(f"\nInput:  {store.input_status.label}")
        print(f"Spec:   {store.spec_status.label}")
        print(f"Output: {store.output_status.label}")

        if store.output_status.level is not StatusLevel.VALID:
            print(f"\n{store.output_status.detail or 'No transform ran'}")
            return

        print(f"\nExecution time: {store.execution_time_ms}ms")
        print(f"Complexity: {store.complexity.value if store.complexity else 'Unknown'}")
        print()
        print(session.tree_view().plain)


if __name__ == "__main__":
    asyncio.run(main())
