"""Walkable network of the Virginia Tech campus (Blacksburg, VA).

Nodes are building entrances, path intersections and landmarks; edges are the
walkways between them with measured lengths in meters. The tables are static
reference data, validated once when the graph singleton is first built.
"""

from __future__ import annotations

from functools import lru_cache

from .campus_graph import CampusEdge, CampusGraph, CampusNode

CAMPUS_NODES: tuple[CampusNode, ...] = (
    # Main Drillfield Area
    CampusNode("torgersen", "Torgersen Hall", (-80.4192, 37.2296), "building"),
    CampusNode("torgersen-bridge", "Torgersen Bridge", (-80.4188, 37.2293), "landmark"),
    CampusNode("newman", "Newman Library", (-80.4188, 37.2285), "building"),
    CampusNode("squires", "Squires Student Center", (-80.4179, 37.2292), "building"),
    CampusNode("burruss", "Burruss Hall", (-80.4228, 37.2292), "building"),
    CampusNode("drillfield-center", "Drillfield Center", (-80.4205, 37.2281), "intersection"),
    CampusNode("drillfield-west", "Drillfield West", (-80.4230, 37.2275), "intersection"),
    CampusNode("drillfield-east", "Drillfield East", (-80.4175, 37.2280), "intersection"),
    CampusNode("war-memorial", "War Memorial Chapel", (-80.4236, 37.2277), "landmark"),
    # Engineering Area
    CampusNode("goodwin", "Goodwin Hall", (-80.4197, 37.2305), "building"),
    CampusNode("whittemore", "Whittemore Hall", (-80.4187, 37.2311), "building"),
    CampusNode("durham", "Durham Hall", (-80.4175, 37.2313), "building"),
    CampusNode("norris", "Norris Hall", (-80.4203, 37.2291), "building"),
    CampusNode("randolph", "Randolph Hall", (-80.4210, 37.2296), "building"),
    CampusNode("hancock", "Hancock Hall", (-80.4198, 37.2282), "building"),
    CampusNode("holden", "Holden Hall", (-80.4211, 37.2275), "building"),
    CampusNode("patton", "Patton Hall", (-80.4226, 37.2298), "building"),
    # Perry Street Corridor
    CampusNode("perry-whittemore", "Perry St @ Whittemore", (-80.4182, 37.2315), "intersection"),
    CampusNode("perry-goodwin", "Perry St @ Goodwin", (-80.4190, 37.2308), "intersection"),
    CampusNode("perry-torg", "Perry St @ Torgersen", (-80.4195, 37.2300), "intersection"),
    # Academic Buildings
    CampusNode("mcbryde", "McBryde Hall", (-80.4238, 37.2285), "building"),
    CampusNode("davidson", "Davidson Hall", (-80.4245, 37.2290), "building"),
    CampusNode("pamplin", "Pamplin Hall", (-80.4254, 37.2295), "building"),
    # Arts & Student Life
    CampusNode("moss-arts", "Moss Arts Center", (-80.4149, 37.2308), "building"),
    CampusNode("glc", "Graduate Life Center", (-80.4172, 37.2271), "building"),
    CampusNode("alumni-mall", "Alumni Mall", (-80.4160, 37.2295), "intersection"),
    # Dining
    CampusNode("owens", "Owens Dining Hall", (-80.4161, 37.2252), "building"),
    CampusNode("d2", "Dietrick Hall (D2)", (-80.4237, 37.2248), "building"),
    CampusNode("west-end", "West End Market", (-80.4257, 37.2269), "building"),
    # Athletics Area
    CampusNode("lane-stadium", "Lane Stadium", (-80.4182, 37.2199), "building"),
    CampusNode("cassell", "Cassell Coliseum", (-80.4172, 37.2208), "building"),
    CampusNode("mccomas", "McComas Hall", (-80.4136, 37.2227), "building"),
    CampusNode("war-memorial-gym", "War Memorial Gym", (-80.4222, 37.2268), "building"),
    # Residential
    CampusNode("ambler-johnston", "Ambler Johnston Hall", (-80.4217, 37.2254), "building"),
    CampusNode("pritchard", "Pritchard Hall", (-80.4253, 37.2260), "building"),
    CampusNode("slusher", "Slusher Hall", (-80.4207, 37.2260), "building"),
    # Key Intersections
    CampusNode("alumni-mall-south", "Alumni Mall South", (-80.4158, 37.2275), "intersection"),
    CampusNode("washington-kent", "Washington St @ Kent St", (-80.4185, 37.2245), "intersection"),
    CampusNode("drillfield-path-n", "Drillfield Path North", (-80.4205, 37.2295), "intersection"),
    CampusNode("drillfield-path-s", "Drillfield Path South", (-80.4205, 37.2268), "intersection"),
    CampusNode("stanger-old-turner", "Stanger @ Old Turner", (-80.4220, 37.2285), "intersection"),
    CampusNode("old-turner-north", "Old Turner St North", (-80.4215, 37.2300), "intersection"),
    CampusNode("west-campus-int", "West Campus Dr Int", (-80.4248, 37.2280), "intersection"),
    # Surge / Research Area
    CampusNode("surge", "Surge Building", (-80.4259, 37.2318), "building"),
    # Downtown Connection Points
    CampusNode("college-main", "College Ave @ Main St", (-80.4135, 37.2295), "intersection"),
    CampusNode("draper-main", "Draper Rd @ Main St", (-80.4110, 37.2305), "intersection"),
)

CAMPUS_EDGES: tuple[CampusEdge, ...] = (
    # Torgersen Bridge Corridor
    CampusEdge("torgersen", "torgersen-bridge", 40.0, "bridge"),
    CampusEdge("torgersen-bridge", "squires", 100.0, "sidewalk"),
    CampusEdge("torgersen-bridge", "newman", 90.0, "sidewalk"),
    CampusEdge("torgersen-bridge", "norris", 50.0, "sidewalk"),
    # Perry Street Corridor
    CampusEdge("torgersen", "perry-torg", 50.0, "sidewalk"),
    CampusEdge("perry-torg", "perry-goodwin", 80.0, "sidewalk"),
    CampusEdge("perry-goodwin", "goodwin", 30.0, "sidewalk"),
    CampusEdge("perry-goodwin", "perry-whittemore", 75.0, "sidewalk"),
    CampusEdge("perry-whittemore", "whittemore", 40.0, "sidewalk"),
    CampusEdge("perry-whittemore", "durham", 60.0, "sidewalk"),
    # Drillfield Paths
    CampusEdge("newman", "drillfield-east", 60.0, "path"),
    CampusEdge("drillfield-east", "drillfield-center", 150.0, "path"),
    CampusEdge("drillfield-center", "drillfield-west", 150.0, "path"),
    CampusEdge("drillfield-west", "war-memorial", 50.0, "path"),
    CampusEdge("drillfield-west", "burruss", 80.0, "path"),
    CampusEdge("drillfield-center", "drillfield-path-n", 80.0, "path"),
    CampusEdge("drillfield-center", "drillfield-path-s", 75.0, "path"),
    # Academic Core
    CampusEdge("norris", "randolph", 50.0, "sidewalk"),
    CampusEdge("randolph", "drillfield-path-n", 40.0, "sidewalk"),
    CampusEdge("drillfield-path-n", "patton", 60.0, "sidewalk"),
    CampusEdge("drillfield-path-n", "old-turner-north", 50.0, "sidewalk"),
    CampusEdge("old-turner-north", "patton", 40.0, "sidewalk"),
    CampusEdge("old-turner-north", "burruss", 70.0, "sidewalk"),
    CampusEdge("hancock", "drillfield-center", 60.0, "path"),
    CampusEdge("hancock", "newman", 50.0, "sidewalk"),
    CampusEdge("holden", "drillfield-path-s", 50.0, "sidewalk"),
    CampusEdge("holden", "stanger-old-turner", 60.0, "sidewalk"),
    CampusEdge("stanger-old-turner", "mcbryde", 80.0, "sidewalk"),
    CampusEdge("stanger-old-turner", "drillfield-west", 70.0, "sidewalk"),
    # West Campus
    CampusEdge("burruss", "davidson", 100.0, "sidewalk"),
    CampusEdge("davidson", "pamplin", 80.0, "sidewalk"),
    CampusEdge("mcbryde", "west-campus-int", 80.0, "sidewalk"),
    CampusEdge("west-campus-int", "war-memorial", 60.0, "sidewalk"),
    CampusEdge("west-campus-int", "west-end", 100.0, "sidewalk"),
    CampusEdge("west-campus-int", "d2", 120.0, "sidewalk"),
    CampusEdge("west-campus-int", "pritchard", 90.0, "sidewalk"),
    # Student Life Area
    CampusEdge("squires", "alumni-mall", 100.0, "sidewalk"),
    CampusEdge("alumni-mall", "moss-arts", 120.0, "sidewalk"),
    CampusEdge("alumni-mall", "alumni-mall-south", 100.0, "sidewalk"),
    CampusEdge("alumni-mall-south", "glc", 50.0, "sidewalk"),
    CampusEdge("alumni-mall-south", "drillfield-east", 60.0, "sidewalk"),
    CampusEdge("alumni-mall", "college-main", 150.0, "sidewalk"),
    CampusEdge("college-main", "draper-main", 200.0, "sidewalk"),
    # Residential & Dining Connections
    CampusEdge("drillfield-path-s", "slusher", 80.0, "sidewalk"),
    CampusEdge("drillfield-path-s", "ambler-johnston", 100.0, "sidewalk"),
    CampusEdge("slusher", "ambler-johnston", 60.0, "sidewalk"),
    CampusEdge("ambler-johnston", "washington-kent", 80.0, "sidewalk"),
    CampusEdge("d2", "ambler-johnston", 100.0, "sidewalk"),
    # Athletics Area
    CampusEdge("washington-kent", "owens", 70.0, "sidewalk"),
    CampusEdge("washington-kent", "mccomas", 150.0, "sidewalk"),
    CampusEdge("owens", "lane-stadium", 200.0, "sidewalk"),
    CampusEdge("mccomas", "cassell", 80.0, "sidewalk"),
    CampusEdge("cassell", "lane-stadium", 100.0, "sidewalk"),
    CampusEdge("glc", "washington-kent", 120.0, "sidewalk"),
    CampusEdge("drillfield-path-s", "war-memorial-gym", 100.0, "sidewalk"),
    CampusEdge("war-memorial-gym", "stanger-old-turner", 80.0, "sidewalk"),
    # Surge / Research Connection
    CampusEdge("pamplin", "surge", 200.0, "sidewalk"),
)


@lru_cache(maxsize=1)
def default_campus_graph() -> CampusGraph:
    return CampusGraph(CAMPUS_NODES, CAMPUS_EDGES)
