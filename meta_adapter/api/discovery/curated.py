"""
Curated catalog data - the built-in API directory, base URL overrides and
per-API endpoint templates
"""

from typing import Any, Dict, List

# Rows use the directory's native field casing so they flow through the same
# parsing path as remote payloads.
BUILTIN_PUBLIC_APIS: List[Dict[str, Any]] = [
    {"API": "Open-Meteo", "Description": "Open-source weather API with hourly and daily forecasts", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Weather", "Link": "https://open-meteo.com/"},
    {"API": "JokeAPI", "Description": "Programming, dark, and general jokes", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://jokeapi.dev/"},
    {"API": "CoinGecko", "Description": "Cryptocurrency data including prices, market cap, and volume", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Cryptocurrency", "Link": "https://www.coingecko.com/en/api"},
    {"API": "Nager.Date", "Description": "Public holidays for various countries", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Calendar", "Link": "https://date.nager.at/"},
    {"API": "Dog CEO", "Description": "Random pictures of dogs", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Animals", "Link": "https://dog.ceo/dog-api/"},
    {"API": "Cat Facts", "Description": "Random facts about cats", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Animals", "Link": "https://catfact.ninja/"},
    {"API": "Numbers", "Description": "Interesting facts about numbers", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Science", "Link": "http://numbersapi.com/"},
    {"API": "Bored", "Description": "Suggestions for random activities", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://www.boredapi.com/"},
    {"API": "Advice Slip", "Description": "Random advice slips", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://api.adviceslip.com/"},
    {"API": "Agify", "Description": "Predict the age of a name", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Science", "Link": "https://agify.io/"},
    {"API": "Genderize", "Description": "Predict the gender of a name", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Science", "Link": "https://genderize.io/"},
    {"API": "Nationalize", "Description": "Predict the nationality of a name", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Science", "Link": "https://nationalize.io/"},
    {"API": "REST Countries", "Description": "Information about countries", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Geocoding", "Link": "https://restcountries.com/"},
    {"API": "IP API", "Description": "IP geolocation data", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Geocoding", "Link": "https://ip-api.com/"},
    {"API": "Open Library", "Description": "Books and library data", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Books", "Link": "https://openlibrary.org/developers/api"},
    {"API": "Chuck Norris", "Description": "Random Chuck Norris jokes", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://api.chucknorris.io/"},
    {"API": "Quotable", "Description": "Random famous quotes", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://quotable.io/"},
    {"API": "Random User", "Description": "Generate random user data", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Open Data", "Link": "https://randomuser.me/"},
    {"API": "JSONPlaceholder", "Description": "Fake online REST API for testing", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Open Data", "Link": "https://jsonplaceholder.typicode.com/"},
    {"API": "PokeAPI", "Description": "Pokemon data and images", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Games", "Link": "https://pokeapi.co/"},
    {"API": "NASA", "Description": "NASA open APIs including APOD", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Science", "Link": "https://api.nasa.gov/"},
    {"API": "SpaceX", "Description": "SpaceX launch and rocket data", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Science", "Link": "https://github.com/r-spacex/SpaceX-API"},
    {"API": "Exchange Rates", "Description": "Currency exchange rate data", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Finance", "Link": "https://exchangerate-api.com/"},
    {"API": "OpenWeatherMap", "Description": "Current weather data worldwide", "Auth": "apiKey", "HTTPS": True, "Cors": "yes", "Category": "Weather", "Link": "https://openweathermap.org/api"},
    {"API": "NewsAPI", "Description": "News headlines from around the world", "Auth": "apiKey", "HTTPS": True, "Cors": "yes", "Category": "News", "Link": "https://newsapi.org/"},
    {"API": "The Movie DB", "Description": "Movies, TV shows, and actors", "Auth": "apiKey", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://www.themoviedb.org/documentation/api"},
    {"API": "Giphy", "Description": "Animated GIFs and stickers", "Auth": "apiKey", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://developers.giphy.com/"},
    {"API": "Unsplash", "Description": "High-quality free photos", "Auth": "apiKey", "HTTPS": True, "Cors": "yes", "Category": "Art & Design", "Link": "https://unsplash.com/developers"},
    {"API": "Lorem Picsum", "Description": "Random placeholder images", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Art & Design", "Link": "https://picsum.photos/"},
    {"API": "TheCocktailDB", "Description": "Cocktail recipes and ingredients", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Food & Drink", "Link": "https://www.thecocktaildb.com/api.php"},
    {"API": "TheMealDB", "Description": "Meal recipes from around the world", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Food & Drink", "Link": "https://www.themealdb.com/api.php"},
    {"API": "Trivia API", "Description": "Trivia questions across categories", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Games", "Link": "https://opentdb.com/api_config.php"},
    {"API": "Deck of Cards", "Description": "Simulate a deck of cards", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Games", "Link": "https://deckofcardsapi.com/"},
    {"API": "RoboHash", "Description": "Generate unique robot images", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Art & Design", "Link": "https://robohash.org/"},
    {"API": "QR Code Generator", "Description": "Generate QR codes", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Open Data", "Link": "https://goqr.me/api/"},
    {"API": "IP Geolocation", "Description": "Geolocation from IP address", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Geocoding", "Link": "https://ipapi.co/"},
    {"API": "URLhaus", "Description": "Malware and malicious URL data", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Security", "Link": "https://urlhaus-api.abuse.ch/"},
    {"API": "Have I Been Pwned", "Description": "Check if email has been breached", "Auth": "apiKey", "HTTPS": True, "Cors": "yes", "Category": "Security", "Link": "https://haveibeenpwned.com/API/v3"},
    {"API": "Carbon Intensity", "Description": "UK electricity carbon intensity", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Environment", "Link": "https://carbonintensity.org.uk/"},
    {"API": "Open Food Facts", "Description": "Food product database", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Food & Drink", "Link": "https://world.openfoodfacts.org/data"},
    {"API": "Dictionary", "Description": "Word definitions and pronunciations", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Books", "Link": "https://dictionaryapi.dev/"},
    {"API": "Faker", "Description": "Generate fake data for testing", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Open Data", "Link": "https://fakerapi.it/en"},
    {"API": "Bible API", "Description": "Bible verses and chapters", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Books", "Link": "https://bible-api.com/"},
    {"API": "Superhero", "Description": "Superhero information database", "Auth": "apiKey", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://superheroapi.com/"},
    {"API": "Punk API", "Description": "Brewdog beer database", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Food & Drink", "Link": "https://punkapi.com/"},
    {"API": "Rick and Morty", "Description": "Rick and Morty character data", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://rickandmortyapi.com/"},
    {"API": "Star Wars", "Description": "Star Wars universe data", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://swapi.dev/"},
    {"API": "Marvel", "Description": "Marvel comics and characters", "Auth": "apiKey", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://developer.marvel.com/"},
    {"API": "xkcd", "Description": "XKCD comics data", "Auth": "", "HTTPS": True, "Cors": "yes", "Category": "Entertainment", "Link": "https://xkcd.com/json.html"},
    {"API": "GitHub", "Description": "GitHub API for repositories and users", "Auth": "oauth", "HTTPS": True, "Cors": "yes", "Category": "Development", "Link": "https://docs.github.com/en/rest"},
    # Chain-data providers
    {"API": "Moralis", "Description": "Unified Web3 API for wallets, NFTs, tokens, and on-chain data", "Auth": "apiKey", "HTTPS": True, "Cors": "yes", "Category": "Web3", "Link": "https://moralis.io/"},
    {"API": "Alchemy", "Description": "Ethereum and multi-chain API for NFTs, tokens, and smart contracts", "Auth": "apiKey", "HTTPS": True, "Cors": "yes", "Category": "Web3", "Link": "https://www.alchemy.com/"},
    {"API": "Helius", "Description": "Solana blockchain API for transactions, tokens, and DeFi data", "Auth": "apiKey", "HTTPS": True, "Cors": "yes", "Category": "Web3", "Link": "https://helius.dev/"},
]

# Well-known APIs whose callable host differs from their documentation link
BASE_URL_MAP: Dict[str, str] = {
    "Open-Meteo": "https://api.open-meteo.com",
    "JokeAPI": "https://v2.jokeapi.dev",
    "CoinGecko": "https://api.coingecko.com",
    "Dog CEO": "https://dog.ceo",
    "Cat Facts": "https://catfact.ninja",
    "Bored": "https://www.boredapi.com",
    "Advice Slip": "https://api.adviceslip.com",
    "Chuck Norris": "https://api.chucknorris.io",
    "Quotable": "https://api.quotable.io",
    "REST Countries": "https://restcountries.com",
    "PokeAPI": "https://pokeapi.co",
    "NASA": "https://api.nasa.gov",
    "Random User": "https://randomuser.me",
    "Nager.Date": "https://date.nager.at",
    "TheCocktailDB": "https://www.thecocktaildb.com",
    "TheMealDB": "https://www.themealdb.com",
    "xkcd": "https://xkcd.com",
    "Rick and Morty": "https://rickandmortyapi.com",
    "Star Wars": "https://swapi.dev",
    "SpaceX": "https://api.spacexdata.com",
    "Trivia API": "https://opentdb.com",
    "IP API": "http://ip-api.com",
    "Agify": "https://api.agify.io",
    "Genderize": "https://api.genderize.io",
    "Nationalize": "https://api.nationalize.io",
    "Dictionary": "https://api.dictionaryapi.dev",
    "Lorem Picsum": "https://picsum.photos",
    "Punk API": "https://api.punkapi.com",
    "JSONPlaceholder": "https://jsonplaceholder.typicode.com",
    "Numbers": "http://numbersapi.com",
    "Open Library": "https://openlibrary.org",
}

# name, path template, method, description
ENDPOINT_TEMPLATES: Dict[str, List[Dict[str, str]]] = {
    "Open-Meteo": [
        {"name": "forecast", "path": "/v1/forecast?latitude={lat}&longitude={lon}&current_weather=true", "method": "GET", "description": "Get current weather and forecast for coordinates"},
    ],
    "JokeAPI": [
        {"name": "random", "path": "/joke/Any", "method": "GET", "description": "Get a random joke"},
        {"name": "programming", "path": "/joke/Programming", "method": "GET", "description": "Get a programming joke"},
    ],
    "CoinGecko": [
        {"name": "prices", "path": "/api/v3/simple/price?ids=bitcoin,ethereum&vs_currencies=usd", "method": "GET", "description": "Get cryptocurrency prices"},
        {"name": "coins", "path": "/api/v3/coins/markets?vs_currency=usd", "method": "GET", "description": "List all coins with market data"},
        {"name": "markets", "path": "/api/v3/coins/markets?vs_currency={vs_currency}&ids={ids}&per_page={per_page}", "method": "GET", "description": "Get cryptocurrency market data with custom parameters"},
    ],
    "Dog CEO": [
        {"name": "random", "path": "/api/breeds/image/random", "method": "GET", "description": "Get a random dog image"},
        {"name": "breed", "path": "/api/breed/{breed}/images", "method": "GET", "description": "Get images by breed"},
    ],
    "Cat Facts": [
        {"name": "fact", "path": "/fact", "method": "GET", "description": "Get a random cat fact"},
        {"name": "facts", "path": "/facts", "method": "GET", "description": "Get multiple cat facts"},
    ],
    "Bored": [
        {"name": "activity", "path": "/api/activity", "method": "GET", "description": "Get a random activity suggestion"},
    ],
    "Advice Slip": [
        {"name": "random", "path": "/advice", "method": "GET", "description": "Get random advice"},
    ],
    "Chuck Norris": [
        {"name": "random", "path": "/jokes/random", "method": "GET", "description": "Get a random Chuck Norris joke"},
    ],
    "Quotable": [
        {"name": "random", "path": "/random", "method": "GET", "description": "Get a random quote"},
        {"name": "quotes", "path": "/quotes", "method": "GET", "description": "List quotes with pagination"},
    ],
    "REST Countries": [
        {"name": "all", "path": "/v3.1/all", "method": "GET", "description": "Get all countries"},
        {"name": "byName", "path": "/v3.1/name/{name}", "method": "GET", "description": "Search countries by name"},
    ],
    "PokeAPI": [
        {"name": "pokemon", "path": "/api/v2/pokemon/{name}", "method": "GET", "description": "Get Pokemon by name"},
        {"name": "list", "path": "/api/v2/pokemon?limit=20", "method": "GET", "description": "List Pokemon"},
    ],
    "NASA": [
        {"name": "apod", "path": "/planetary/apod", "method": "GET", "description": "Astronomy Picture of the Day"},
    ],
    "Random User": [
        {"name": "user", "path": "/api/", "method": "GET", "description": "Generate random user data"},
    ],
    "Nager.Date": [
        {"name": "holidays", "path": "/api/v3/PublicHolidays/{year}/{country}", "method": "GET", "description": "Get public holidays for a country"},
        {"name": "nextHoliday", "path": "/api/v3/NextPublicHolidays/{country}", "method": "GET", "description": "Get next public holidays"},
    ],
    "TheCocktailDB": [
        {"name": "random", "path": "/api/json/v1/1/random.php", "method": "GET", "description": "Get a random cocktail recipe"},
        {"name": "search", "path": "/api/json/v1/1/search.php?s={name}", "method": "GET", "description": "Search cocktails by name"},
    ],
    "TheMealDB": [
        {"name": "random", "path": "/api/json/v1/1/random.php", "method": "GET", "description": "Get a random meal recipe"},
        {"name": "search", "path": "/api/json/v1/1/search.php?s={name}", "method": "GET", "description": "Search meals by name"},
    ],
    "xkcd": [
        {"name": "current", "path": "/info.0.json", "method": "GET", "description": "Get the current XKCD comic"},
    ],
    "Rick and Morty": [
        {"name": "characters", "path": "/api/character", "method": "GET", "description": "List all characters"},
        {"name": "character", "path": "/api/character/{id}", "method": "GET", "description": "Get character by ID"},
    ],
    "Star Wars": [
        {"name": "people", "path": "/api/people/", "method": "GET", "description": "List Star Wars characters"},
        {"name": "planets", "path": "/api/planets/", "method": "GET", "description": "List Star Wars planets"},
    ],
    "SpaceX": [
        {"name": "launches", "path": "/v5/launches/latest", "method": "GET", "description": "Get latest launch"},
        {"name": "rockets", "path": "/v4/rockets", "method": "GET", "description": "List all rockets"},
    ],
    "Trivia API": [
        {"name": "questions", "path": "/api.php?amount=10", "method": "GET", "description": "Get trivia questions"},
    ],
    "IP API": [
        {"name": "lookup", "path": "/json/", "method": "GET", "description": "Get geolocation for current IP"},
    ],
    "Agify": [
        {"name": "predict", "path": "/?name={name}", "method": "GET", "description": "Predict age from name"},
    ],
    "Genderize": [
        {"name": "predict", "path": "/?name={name}", "method": "GET", "description": "Predict gender from name"},
    ],
    "Nationalize": [
        {"name": "predict", "path": "/?name={name}", "method": "GET", "description": "Predict nationality from name"},
    ],
    "Dictionary": [
        {"name": "define", "path": "/api/v2/entries/en/{word}", "method": "GET", "description": "Get word definition"},
    ],
    "Lorem Picsum": [
        {"name": "random", "path": "/200/300", "method": "GET", "description": "Get a random image"},
    ],
    "Punk API": [
        {"name": "random", "path": "/v2/beers/random", "method": "GET", "description": "Get a random beer"},
        {"name": "list", "path": "/v2/beers", "method": "GET", "description": "List beers"},
    ],
    "JSONPlaceholder": [
        {"name": "posts", "path": "/posts", "method": "GET", "description": "List all posts"},
        {"name": "users", "path": "/users", "method": "GET", "description": "List all users"},
    ],
    "Numbers": [
        {"name": "trivia", "path": "/{number}/trivia", "method": "GET", "description": "Get trivia about a number"},
        {"name": "random", "path": "/random/trivia", "method": "GET", "description": "Get random number trivia"},
    ],
    "Open Library": [
        {"name": "search", "path": "/search.json?q={query}", "method": "GET", "description": "Search books"},
        {"name": "book", "path": "/api/books?bibkeys=ISBN:{isbn}&format=json", "method": "GET", "description": "Get book by ISBN"},
    ],
}
