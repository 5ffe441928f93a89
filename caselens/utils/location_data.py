# caselens/utils/location_data.py
"""Static lookup tables used before any network call is made when normalizing locations."""
from caselens.models.case import DEFAULT_LAT, DEFAULT_LNG

DEFAULT_LOCATION = "United States"
DEFAULT_COORDINATES = (DEFAULT_LAT, DEFAULT_LNG)

# lowercase alias -> canonical name. Insertion order matters for substring matching.
LOCATION_ALIASES = {
    # US cities
    "nyc": "New York, NY, USA",
    "new york city": "New York, NY, USA",
    "new york": "New York, NY, USA",
    "la": "Los Angeles, CA, USA",
    "los angeles": "Los Angeles, CA, USA",
    "sf": "San Francisco, CA, USA",
    "san francisco": "San Francisco, CA, USA",
    "chi": "Chicago, IL, USA",
    "chicago": "Chicago, IL, USA",
    "dc": "Washington, DC, USA",
    "washington dc": "Washington, DC, USA",
    "washington d.c.": "Washington, DC, USA",
    "miami": "Miami, FL, USA",
    "boston": "Boston, MA, USA",
    "seattle": "Seattle, WA, USA",
    "philly": "Philadelphia, PA, USA",
    "philadelphia": "Philadelphia, PA, USA",
    "phoenix": "Phoenix, AZ, USA",
    "houston": "Houston, TX, USA",
    "dallas": "Dallas, TX, USA",
    "atlanta": "Atlanta, GA, USA",
    "denver": "Denver, CO, USA",
    "portland": "Portland, OR, USA",
    # states
    "california": "California, USA",
    "texas": "Texas, USA",
    "florida": "Florida, USA",
    "newyork": "New York, NY, USA",
    # unknown
    "unknown": DEFAULT_LOCATION,
}

# canonical name -> (lat, lng)
CITY_COORDINATES = {
    "New York, NY, USA": (40.7128, -74.0060),
    "Los Angeles, CA, USA": (34.0522, -118.2437),
    "Chicago, IL, USA": (41.8781, -87.6298),
    "Houston, TX, USA": (29.7604, -95.3698),
    "Phoenix, AZ, USA": (33.4484, -112.0740),
    "Philadelphia, PA, USA": (39.9526, -75.1652),
    "San Antonio, TX, USA": (29.4241, -98.4936),
    "San Diego, CA, USA": (32.7157, -117.1611),
    "Dallas, TX, USA": (32.7767, -96.7970),
    "San Jose, CA, USA": (37.3382, -121.8863),
    "Austin, TX, USA": (30.2672, -97.7431),
    "Jacksonville, FL, USA": (30.3322, -81.6557),
    "San Francisco, CA, USA": (37.7749, -122.4194),
    "Indianapolis, IN, USA": (39.7684, -86.1581),
    "Columbus, OH, USA": (39.9612, -82.9988),
    "Fort Worth, TX, USA": (32.7555, -97.3308),
    "Charlotte, NC, USA": (35.2271, -80.8431),
    "Seattle, WA, USA": (47.6062, -122.3321),
    "Denver, CO, USA": (39.7392, -104.9903),
    "Washington, DC, USA": (38.9072, -77.0369),
    "Boston, MA, USA": (42.3601, -71.0589),
    "Miami, FL, USA": (25.7617, -80.1918),
    "Atlanta, GA, USA": (33.7490, -84.3880),
    "Portland, OR, USA": (45.5152, -122.6784),
    DEFAULT_LOCATION: DEFAULT_COORDINATES,
}
