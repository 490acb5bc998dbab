"""Sample recipes served by the API and reused as test fixtures."""

EXAMPLES = [
    {
        "description": "A mounting plate with two through holes",
        "recipe": {
            "version": 1,
            "units": "mm",
            "name": "mounting plate",
            "root": {
                "type": "subtract",
                "children": [
                    {"type": "cuboid", "size": [40, 20, 4]},
                    {"type": "cylinder", "height": 10, "radius": 3, "center": [-12, 0, 0]},
                    {"type": "cylinder", "height": 10, "radius": 3, "center": [12, 0, 0]},
                ],
            },
        },
    },
    {
        "description": "A peg lying along the Y axis",
        "recipe": {
            "version": 1,
            "name": "peg",
            "root": {
                "type": "rotate",
                "angles": [90, 0, 0],
                "child": {"type": "cylinder", "height": 20, "radius": 4, "segments": 24},
            },
        },
    },
    {
        "description": "A snowman",
        "recipe": {
            "version": 1,
            "units": "cm",
            "name": "snowman",
            "root": {
                "type": "union",
                "children": [
                    {"type": "sphere", "radius": 6},
                    {
                        "type": "translate",
                        "offset": [0, 0, 9],
                        "child": {"type": "sphere", "radius": 4.5},
                    },
                    {
                        "type": "translate",
                        "offset": [0, 0, 15],
                        "child": {"type": "sphere", "radius": 3},
                    },
                ],
            },
        },
    },
    {
        "description": "A flat washer",
        "recipe": {
            "version": 1,
            "name": "washer",
            "root": {
                "type": "subtract",
                "children": [
                    {"type": "cylinder", "height": 2, "radius": 10, "segments": 48},
                    {"type": "cylinder", "height": 4, "radius": 4, "segments": 48},
                ],
            },
        },
    },
    {
        "description": "A lens from two overlapping spheres",
        "recipe": {
            "version": 1,
            "name": "lens",
            "root": {
                "type": "intersect",
                "children": [
                    {"type": "sphere", "radius": 10, "center": [0, 0, -7]},
                    {"type": "sphere", "radius": 10, "center": [0, 0, 7]},
                ],
            },
        },
    },
    {
        "description": "An ellipsoid made by stretching a sphere",
        "recipe": {
            "version": 1,
            "name": "ellipsoid",
            "root": {
                "type": "scale",
                "factors": [2, 1, 0.5],
                "child": {"type": "sphere", "radius": 5},
            },
        },
    },
]
