# userapi

A small JSON HTTP service that keeps user accounts in a MongoDB collection.
It checks a user's password and issues a signed JSON Web Token, and lets
clients list, fetch, update and delete users.

## Running the server

```
userapi
```

Options:

| Option        | Default                     | Meaning                          |
|---------------|-----------------------------|----------------------------------|
| `--mongo-uri` | `mongodb://localhost:27017` | MongoDB connection string        |
| `--host`      | `0.0.0.0`                   | address to listen on             |
| `--port`      | `1323`                      | port to listen on                |

On start the server connects to MongoDB (waiting up to ten seconds), prints
`✅ Connected to MongoDB!`, uses the `users` collection of the `testdb`
database and makes sure the `email` field carries a unique ascending index.
If the connection or the index fails, the error is printed and the command
exits with status 1. A background thread prints the number of stored users
every ten seconds (`📢 Number of users: N`), or the error if counting fails.

## Endpoints

| Method   | Path            | Body / parameters                        | Result on success      |
|----------|-----------------|------------------------------------------|------------------------|
| `POST`   | `/Authenticate` | `{"name": ..., "password": ...}`         | `{"token": "..."}`     |
| `POST`   | `/update`       | `{"id": ..., "name": ..., "email": ...}` | `""`                   |
| `GET`    | `/users`        | none                                     | array of users         |
| `GET`    | `/user/<id>`    | hex object id in the path                | one user               |
| `DELETE` | `/user/<id>`    | hex object id in the path                | `""`                   |

`/Authenticate` looks the user up by `name` and compares the password with
the bcrypt hash stored in the document's `password` field. The token is
signed with HS256, carries the claims `name`, `admin` (always `true`) and
`exp`, and expires after 72 hours.

On `/update`, only `name` and `email` can be changed, and only the ones that
are given and non-empty.

Users are returned as JSON objects with `id` (hex string), `name`, `email`,
`password` (the stored hash) and `createdAt` (an RFC 3339 timestamp). When
the collection is empty, `/users` answers with `null`.

Errors are reported as JSON with a `message` field. Unknown ids, malformed
ids, unknown user names and invalid request bodies answer with status 500;
a wrong password on `/Authenticate` answers with 401.

## What it does not do

There is no endpoint for creating users: documents have to be put into the
`users` collection by other means, with a bcrypt hash in `password`. No
endpoint requires a token; the tokens issued by `/Authenticate` are not
checked by this server.

## Using it from Python

`userapi.app.create_app(collection)` builds the Flask application around any
MongoDB collection, which is handy for embedding or testing. The same module
provides `connect_mongo(uri)`, `create_unique_email_index(collection)`,
`count_users(collection)`, `start_user_counter(collection, interval)` and
`main(argv)`.

Each operation lives in its own module (`userapi.authenticate`,
`userapi.deletebyid`, `userapi.fetchuserbyid`, `userapi.listalluser`,
`userapi.updatebyid`) as a service class doing the database work and a
handler class whose `handle(ctx, db)` turns a request `Context` from
`userapi.web` into a JSON response or raises an `HTTPError`.